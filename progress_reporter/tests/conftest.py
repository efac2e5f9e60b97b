from __future__ import annotations

import io
import threading

import pytest

from progress_reporter import ui

SECOND = 1_000_000_000


class FakeClock:
    """Manually advanced nanosecond clock."""

    def __init__(self, start: int = 0) -> None:
        self.now = start
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            return self.now

    def tick(self, seconds: float = 0, *, ns: int = 0) -> None:
        with self._lock:
            self.now += int(seconds * SECOND) + ns


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(start=1_000 * SECOND)


@pytest.fixture
def sink() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def warn_buf() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def warn_console(warn_buf):
    return ui.make_console(file=warn_buf, width=200, color_system=None)


@pytest.fixture(autouse=True)
def _plain_ui(monkeypatch):
    monkeypatch.delenv("FORCE_ASCII_UI", raising=False)
    ui.set_verbose(False)
    yield
    ui.set_verbose(False)
