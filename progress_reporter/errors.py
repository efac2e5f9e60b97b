#!/usr/bin/env python3
"""
Exceptions raised by progress_reporter.
"""


class ProgressReporterError(Exception):
    """Base exception for progress_reporter."""
    pass


class StageTimerError(ProgressReporterError):
    """Misuse of a StageTimer."""
    pass


class StageNotStartedError(StageTimerError, LookupError):
    """end_stage() called for a stage with no pending start."""

    def __init__(self, name: str):
        super().__init__(f"stage '{name}' has no pending start")
        self.name = name


class UnknownStageError(StageTimerError, KeyError):
    """Lookup of a stage name that was never recorded."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"unknown stage '{self.name}'"
