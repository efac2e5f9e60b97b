#!/usr/bin/env python3
"""
Stage-duration reporter.

`StageTimer` times an overall operation plus any number of named stages
inside it. Each stage may run many times; the timer keeps count, total, max
and min per name and prints a summary on request:

    Total duration: 12 s
    	Key: load, Count: 1, Total duration: 3 s, Max duration: 3 s, Min duration: 3 s
    	Key: parse, Count: 40, Total duration: 8 s, Max duration: 1 s, Min duration: 0 s

Stages are paired with start_stage()/end_stage() or the `stage()` context
manager. Ending a stage that has no pending start raises
StageNotStartedError.
"""

from __future__ import annotations

import logging
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterator, List, Optional, TextIO

from rich.table import Table

from .errors import StageNotStartedError, UnknownStageError
from .utils import MAX_DURATION, monotonic_ns, truncate_seconds

logger = logging.getLogger(__name__)


@dataclass
class StageStats:
    """Cumulative timings (nanoseconds) for one stage name."""

    name: str
    total_duration: int = 0
    count: int = 0
    max_duration: int = 0
    min_duration: int = MAX_DURATION
    pending_start: Optional[int] = None

    def record(self, sample: int) -> None:
        self.total_duration += sample
        self.count += 1
        if sample > self.max_duration:
            self.max_duration = sample
        if sample < self.min_duration:
            self.min_duration = sample

    def min_seconds(self) -> int:
        # unset until the first sample lands
        return truncate_seconds(self.min_duration) if self.count else 0

    def report_line(self) -> str:
        return (
            f"\tKey: {self.name}, Count: {self.count}, "
            f"Total duration: {truncate_seconds(self.total_duration)} s, "
            f"Max duration: {truncate_seconds(self.max_duration)} s, "
            f"Min duration: {self.min_seconds()} s"
        )


class StageTimer:
    """Records overall and per-stage durations. Thread-safe."""

    def __init__(self, *, out: Optional[TextIO] = None, clock: Optional[Callable[[], int]] = None) -> None:
        self.out = out or sys.stdout
        self._clock = clock or monotonic_ns
        self._lock = threading.RLock()
        self.overall_start: Optional[int] = None
        self.overall_end: Optional[int] = None
        self.overall_duration = 0
        self._stages: Dict[str, StageStats] = {}

    # ---------- overall ----------

    def start_overall(self) -> None:
        with self._lock:
            self.overall_start = self._clock()

    def end_overall(self) -> int:
        """Record the end time and return the overall duration (ns).

        Without a prior start_overall() the start counts as 0, so the result is
        just the raw clock reading.
        """
        with self._lock:
            self.overall_end = self._clock()
            self.overall_duration = self.overall_end - (self.overall_start or 0)
            return self.overall_duration

    # ---------- stages ----------

    def start_stage(self, name: str) -> None:
        """(Re)start `name`; an unconsumed earlier start is replaced."""
        with self._lock:
            stats = self._stages.get(name)
            if stats is None:
                stats = self._stages[name] = StageStats(name)
            stats.pending_start = self._clock()

    def end_stage(self, name: str) -> int:
        """Close the pending start of `name`, fold the sample into its stats and return it (ns)."""
        with self._lock:
            now = self._clock()
            stats = self._stages.get(name)
            if stats is None or stats.pending_start is None:
                raise StageNotStartedError(name)
            start, stats.pending_start = stats.pending_start, None
            return self._record(stats, start, now)

    @contextmanager
    def stage(self, name: str) -> Iterator[StageStats]:
        """Time the body of a `with` block as one run of `name`.

        The start is held locally, so the same name may be nested or used from
        several threads at once without disturbing start_stage()/end_stage().
        """
        with self._lock:
            stats = self._stages.get(name)
            if stats is None:
                stats = self._stages[name] = StageStats(name)
            start = self._clock()
        try:
            yield stats
        finally:
            with self._lock:
                self._record(stats, start, self._clock())

    def _record(self, stats: StageStats, start: int, now: int) -> int:
        # caller holds the lock
        sample = now - start
        stats.record(sample)
        logger.debug(f"stage '{stats.name}' #{stats.count} took {sample} ns")
        return sample

    def stats(self, name: str) -> StageStats:
        """Copy of the stats for `name`."""
        with self._lock:
            try:
                return replace(self._stages[name])
            except KeyError:
                raise UnknownStageError(name) from None

    def stage_names(self) -> List[str]:
        with self._lock:
            return sorted(self._stages)

    # ---------- reporting ----------

    def report_lines(self) -> List[str]:
        with self._lock:
            lines = [f"Total duration: {truncate_seconds(self.overall_duration)} s"]
            for name in sorted(self._stages):
                lines.append(self._stages[name].report_line())
            return lines

    def report(self) -> None:
        """Write the summary to `out`, stage names in sorted order."""
        lines = self.report_lines()
        self.out.write("\n".join(lines) + "\n")
        flush = getattr(self.out, "flush", None)
        if flush is not None:
            flush()
        logger.debug(f"stage report written ({len(lines) - 1} stages)")

    def table(self, title: str = "Stage timings") -> Table:
        """Same figures as report(), as a Rich table."""
        table = Table(title=title, show_header=True, header_style="bold magenta")
        for col in ("Stage", "Count", "Total (s)", "Max (s)", "Min (s)"):
            table.add_column(col, justify="left" if col == "Stage" else "right")
        with self._lock:
            for name in sorted(self._stages):
                st = self._stages[name]
                table.add_row(
                    name,
                    str(st.count),
                    str(truncate_seconds(st.total_duration)),
                    str(truncate_seconds(st.max_duration)),
                    str(st.min_seconds()),
                )
            table.caption = f"Total duration: {truncate_seconds(self.overall_duration)} s"
        return table
