#!/usr/bin/env python3
"""
progress_reporter CLI demos

- `progress` drives a single bar from one thread, changing stage every quarter.
- `threads` hammers one bar from many worker threads and checks nothing is lost.
- `stages` times a few named stages with StageTimer and prints the report.

Single-letter flags exist for all options.
"""
from __future__ import annotations

import argparse
import sys
import threading
import time
from typing import List

from . import ui
from .progress import CHARSETS, ProgressTracker
from .stage_timer import StageTimer


def _sleep(sec: float) -> None:
    if sec > 0:
        time.sleep(sec)


def demo_progress(args: argparse.Namespace) -> int:
    tracker = ProgressTracker("Progress", args.total, args.width, charset=args.charset)
    quarter = max(1, args.total // 4)
    for i in range(args.total):
        if i % quarter == 0:
            tracker.set_stage(f"part {i // quarter + 1}")
        _sleep(args.interval)
        tracker.advance_one()
    tracker.finish()
    return 0


def demo_threads(args: argparse.Namespace) -> int:
    expected = args.threads * args.items
    tracker = ProgressTracker("Workers", expected, args.width, charset=args.charset)

    def worker(idx: int) -> None:
        for _ in range(args.items):
            tracker.advance(1)
            _sleep(args.interval)
        tracker.set_stage(f"worker {idx} done")

    workers = [threading.Thread(target=worker, args=(i,), name=f"worker-{i}") for i in range(args.threads)]
    for t in workers:
        t.start()
    for t in workers:
        t.join()

    got = tracker.current
    tracker.finish()
    if got != expected:
        ui.log_error(f"lost updates: expected {expected}, counted {got}")
        return 1
    ui.log_success(f"{args.threads} threads x {args.items} items -> {got}/{expected}")
    return 0


def demo_stages(args: argparse.Namespace) -> int:
    timer = StageTimer()
    timer.start_overall()
    for _ in range(args.repeat):
        for n in range(args.stages):
            with timer.stage(f"stage-{n + 1}"):
                _sleep(args.interval * (n + 1))
    timer.end_overall()
    if args.table:
        ui.console.print(timer.table())
    else:
        timer.report()
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="progress-reporter", description="Progress bar and stage timer demos.")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_bar_opts(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("-w", "--width", type=int, default=30, help="Bar width in characters.")
        sp.add_argument("-c", "--charset", choices=sorted(CHARSETS), default="classic")
        sp.add_argument("-i", "--interval", type=float, default=0.05, help="Sleep between updates (s).")

    sp = sub.add_parser("progress", help="Single-threaded bar with stage changes.")
    add_bar_opts(sp)
    sp.add_argument("-t", "--total", type=int, default=40)
    sp.set_defaults(func=demo_progress)

    sp = sub.add_parser("threads", help="Many threads advancing one shared bar.")
    add_bar_opts(sp)
    sp.add_argument("-n", "--threads", type=int, default=8)
    sp.add_argument("-m", "--items", type=int, default=25, help="Advances per thread.")
    sp.set_defaults(func=demo_threads)

    sp = sub.add_parser("stages", help="Time named stages and print the report.")
    sp.add_argument("-s", "--stages", type=int, default=3)
    sp.add_argument("-r", "--repeat", type=int, default=2)
    sp.add_argument("-i", "--interval", type=float, default=0.05)
    sp.add_argument("-T", "--table", action="store_true", help="Print a Rich table instead of plain lines.")
    sp.set_defaults(func=demo_stages)

    p.add_argument("-v", "--verbose", action="store_true")
    return p


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    ui.set_verbose(args.verbose)
    ui.log_info(f"running '{args.cmd}' demo")
    return int(args.func(args))


if __name__ == "__main__":
    sys.exit(main())
