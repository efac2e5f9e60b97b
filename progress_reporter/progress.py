#!/usr/bin/env python3
"""
Single-line terminal progress tracker.

`ProgressTracker` keeps `current`/`total` counters, a stage label and a start
timestamp. Every mutation re-renders one status line prefixed with a carriage
return, so repeated renders overwrite the same terminal row:

    Build: [=====-----]  50% (10/20) | Stage: compile | Elapsed: 4s | Avg: 2.5 items/s | ETA: 4s

Design goals:
- Safe to call from many worker threads; each update and its display are
  atomic with respect to each other.
- Derived values (percent, rate, ETA) are recomputed from the raw counters on
  every render; nothing is cached.
- `total == 0` renders an empty bar at 0% instead of dividing by zero.

Typical usage
-------------
    from progress_reporter import ProgressTracker

    tracker = ProgressTracker("Download", total=len(urls), bar_width=30)
    with ThreadPoolExecutor() as pool:
        for _ in pool.map(fetch, urls):
            tracker.advance_one()
    tracker.finish()

The tracker can also be used as a context manager; `finish()` runs when the
block exits cleanly.
"""

from __future__ import annotations

import logging
import sys
import threading
from dataclasses import dataclass
from typing import Callable, Optional, TextIO

from rich.console import Console

from . import ui
from .utils import NANOS_PER_SECOND, format_duration, monotonic_ns

logger = logging.getLogger(__name__)

DONE_STAGE = "done"

ETA_DONE = "done"
ETA_ESTIMATING = "estimating"
ETA_UNAVAILABLE = "unavailable"

# name -> (fill, empty)
CHARSETS = {
    "classic": ("=", "-"),
    "ascii": ("#", "-"),
    "block": ("█", "░"),
}

LINE_FORMAT = (
    "{label}: [{bar}] {percent:3.0f}% ({current}/{total}) | Stage: {stage} "
    "| Elapsed: {elapsed} | Avg: {rate:.1f} items/s | ETA: {eta}"
)


@dataclass(frozen=True)
class ProgressSnapshot:
    """Raw counters plus the values derived from them at one instant."""

    label: str
    current: int
    total: int
    stage_label: str
    bar_width: int
    elapsed_ns: int
    rate: float
    percent: float
    filled_width: int
    eta: str

    @property
    def complete(self) -> bool:
        return self.total > 0 and self.current == self.total

    def bar(self, fill: str = "=", empty: str = "-") -> str:
        return fill * self.filled_width + empty * (self.bar_width - self.filled_width)

    def line(self, fill: str = "=", empty: str = "-") -> str:
        return LINE_FORMAT.format(
            label=self.label,
            bar=self.bar(fill, empty),
            percent=self.percent,
            current=self.current,
            total=self.total,
            stage=self.stage_label,
            elapsed=format_duration(self.elapsed_ns),
            rate=self.rate,
            eta=self.eta,
        )


def resolve_charset(charset: str, stream: Optional[TextIO] = None) -> tuple[str, str]:
    """Return (fill, empty) for `charset`, downgrading unicode glyphs on ASCII-only consoles."""
    if charset not in CHARSETS:
        raise ValueError(f"unknown charset '{charset}' (choose from {', '.join(sorted(CHARSETS))})")
    if charset == "block" and ui.needs_ascii_ui(stream):
        charset = "ascii"
    return CHARSETS[charset]


class ProgressTracker:
    """Thread-safe progress counter that renders a one-line status.

    Parameters
    ----------
    label : str
        Printed before the bar.
    total : int
        Units representing 100%. Negative values are clamped to 0.
    bar_width : int, default 30
        Number of characters inside the brackets. Must be > 0.
    charset : str, default "classic"
        "classic" ('=' / '-'), "ascii" ('#' / '-') or "block" ('█' / '░').
    out : TextIO, optional
        Stream for the status line (default sys.stdout).
    clock : callable, optional
        Returns monotonic nanoseconds (default time.monotonic_ns).
    console : rich Console, optional
        Where warnings are printed (default the shared ui console).
    """

    def __init__(
        self,
        label: str,
        total: int,
        bar_width: int = 30,
        *,
        charset: str = "classic",
        out: Optional[TextIO] = None,
        clock: Optional[Callable[[], int]] = None,
        console: Optional[Console] = None,
    ) -> None:
        if int(bar_width) <= 0:
            raise ValueError("bar_width must be > 0")
        self._label = str(label)
        self._total = max(0, int(total))
        self._current = 0
        self._bar_width = int(bar_width)
        self._stage_label = ""
        self.out = out or sys.stdout
        self.console = console
        self._clock = clock or monotonic_ns
        self._fill, self._empty = resolve_charset(charset, self.out)
        self._lock = threading.RLock()
        self._started_at = self._clock()
        logger.debug(f"tracker '{self._label}' created: total={self._total} width={self._bar_width}")

    # ----------------
    # Read-only state
    # ----------------
    @property
    def label(self) -> str:
        return self._label

    @property
    def current(self) -> int:
        with self._lock:
            return self._current

    @property
    def total(self) -> int:
        with self._lock:
            return self._total

    @property
    def stage_label(self) -> str:
        with self._lock:
            return self._stage_label

    @property
    def bar_width(self) -> int:
        return self._bar_width

    @property
    def started_at(self) -> int:
        return self._started_at

    @property
    def is_complete(self) -> bool:
        with self._lock:
            return self._total > 0 and self._current == self._total

    # ----------------
    # Mutations
    # ----------------
    def advance(self, n: int = 1) -> None:
        """Add `n` completed units (clamped to total) and render. Negative `n` is rejected."""
        with self._lock:
            if n < 0:
                logger.warning(f"tracker '{self._label}': rejected negative advance ({n})")
                ui.log_warning(f"{self._label}: advance amount cannot be negative ({n})", target=self.console)
                return
            self._current = min(self._current + int(n), self._total)
            self._render()

    def advance_one(self) -> None:
        self.advance(1)

    def adjust_total(self, delta: int) -> None:
        """Grow or shrink the work estimate; total never drops below 0 and current follows it down."""
        with self._lock:
            self._total = max(self._total + int(delta), 0)
            if self._current > self._total:
                self._current = self._total
            self._render()

    def set_stage(self, label: str) -> None:
        with self._lock:
            self._stage_label = str(label)
            self._render()

    def render(self) -> None:
        """Write the status line now. Terminates the line once current == total > 0."""
        with self._lock:
            self._render()

    def finish(self) -> None:
        """Force completion, mark the stage done and leave the cursor on a fresh line."""
        with self._lock:
            self._current = self._total
            self._stage_label = DONE_STAGE
            if not self._render():
                self.out.write("\n")
                self._flush()
            logger.debug(f"tracker '{self._label}' finished at {self._current}/{self._total}")

    def __enter__(self) -> "ProgressTracker":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.finish()
        return False

    # ----------------
    # Derived values
    # ----------------
    def snapshot(self) -> ProgressSnapshot:
        with self._lock:
            return self._snapshot()

    def _snapshot(self) -> ProgressSnapshot:
        current, total = self._current, self._total
        elapsed_ns = self._clock() - self._started_at

        rate = 0.0
        if elapsed_ns > 0 and current > 0:
            rate = current / (elapsed_ns / NANOS_PER_SECOND)

        if total > 0:
            percent = 100.0 * current / total
            filled = (self._bar_width * current) // total
        else:
            percent = 0.0
            filled = 0

        if current == total:
            eta = ETA_DONE
        elif current == 0:
            eta = ETA_ESTIMATING
        elif rate == 0:
            eta = ETA_UNAVAILABLE
        else:
            # (total - current) / rate, kept in integer nanoseconds
            remaining_ns = ((total - current) * elapsed_ns + current // 2) // current
            eta = format_duration(remaining_ns)

        return ProgressSnapshot(
            label=self._label,
            current=current,
            total=total,
            stage_label=self._stage_label,
            bar_width=self._bar_width,
            elapsed_ns=elapsed_ns,
            rate=rate,
            percent=percent,
            filled_width=filled,
            eta=eta,
        )

    # ----------------
    # Internals
    # ----------------
    def _render(self) -> bool:
        # caller holds the lock; returns True when the line was terminated
        snap = self._snapshot()
        self.out.write("\r" + snap.line(self._fill, self._empty))
        if snap.complete:
            self.out.write("\n")
        self._flush()
        return snap.complete

    def _flush(self) -> None:
        flush = getattr(self.out, "flush", None)
        if flush is not None:
            flush()
