#!/usr/bin/env python3
"""
Duration helpers shared by ProgressTracker and StageTimer.

Durations are plain integers counting nanoseconds; conversion to seconds
only happens at display time.
"""

from __future__ import annotations

import time

NANOS_PER_SECOND = 1_000_000_000

# Largest signed 64-bit duration, the starting point for min tracking.
MAX_DURATION = 2 ** 63 - 1


def monotonic_ns() -> int:
    """Default clock: monotonic nanoseconds."""
    return time.monotonic_ns()


def round_seconds(duration_ns: int) -> int:
    """Round a nanosecond duration to the nearest whole second (halves away from zero)."""
    half = NANOS_PER_SECOND // 2
    if duration_ns < 0:
        return -((-duration_ns + half) // NANOS_PER_SECOND)
    return (duration_ns + half) // NANOS_PER_SECOND


def truncate_seconds(duration_ns: int) -> int:
    """Whole seconds in a nanosecond duration, truncated toward zero."""
    if duration_ns < 0:
        return -(-duration_ns // NANOS_PER_SECOND)
    return duration_ns // NANOS_PER_SECOND


def format_seconds(seconds: int) -> str:
    """Compact h/m/s form: 0s, 42s, 1m5s, 2h0m3s."""
    sign = "-" if seconds < 0 else ""
    s = abs(int(seconds))
    minutes, sec = divmod(s, 60)
    hours, minute = divmod(minutes, 60)
    if hours > 0:
        return f"{sign}{hours}h{minute}m{sec}s"
    if minute > 0:
        return f"{sign}{minute}m{sec}s"
    return f"{sign}{sec}s"


def format_duration(duration_ns: int) -> str:
    """Round to the nearest second and format with format_seconds()."""
    return format_seconds(round_seconds(duration_ns))
