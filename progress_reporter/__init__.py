#!/usr/bin/env python3
"""
Lightweight exports for progress_reporter.
"""

from .progress import ProgressTracker, ProgressSnapshot, DONE_STAGE  # noqa: F401
from .stage_timer import StageTimer, StageStats  # noqa: F401
from .errors import (  # noqa: F401
    ProgressReporterError,
    StageTimerError,
    StageNotStartedError,
    UnknownStageError,
)

__all__ = [
    "ProgressTracker",
    "ProgressSnapshot",
    "DONE_STAGE",
    "StageTimer",
    "StageStats",
    "ProgressReporterError",
    "StageTimerError",
    "StageNotStartedError",
    "UnknownStageError",
]
