#!/usr/bin/env python3
"""
Console helpers for progress_reporter.

Built on Rich, it provides:
  - log_info / log_warning / log_error / log_success on a themed console.
  - set_verbose() to toggle log_info.
  - needs_ascii_ui() to decide when to avoid unicode glyphs.

The progress line itself is written straight to a text stream, not through
Rich, so that the carriage-return overwrite stays byte-exact.
"""

from __future__ import annotations

import os
import sys
from typing import Optional, TextIO

from rich.console import Console
from rich.theme import Theme

# ---------- Console + Theme ----------

THEME = Theme(
    {
        "ui.info": "cyan",
        "ui.success": "green bold",
        "ui.warn": "yellow bold",
        "ui.error": "red bold",
    }
)

console = Console(theme=THEME, highlight=False)

VERBOSE = False


def make_console(file: Optional[TextIO] = None, **kwargs) -> Console:
    """Build a Console with the package theme (e.g. around a StringIO in tests)."""
    kwargs.setdefault("highlight", False)
    return Console(file=file, theme=THEME, **kwargs)


def set_verbose(verbose: bool) -> None:
    """Set global verbosity. If False, log_info is suppressed."""
    global VERBOSE
    VERBOSE = bool(verbose)


def needs_ascii_ui(stream: Optional[TextIO] = None) -> bool:
    if os.environ.get("FORCE_ASCII_UI") == "1":
        return True
    stream = stream if stream is not None else sys.stdout
    enc = (getattr(stream, "encoding", "") or "").upper()
    return os.name == "nt" and "UTF-8" not in enc


# ---------- Logging ----------


def log_info(message: str, *, target: Optional[Console] = None) -> None:
    """Info is suppressed unless VERBOSE is True."""
    if VERBOSE:
        (target or console).print(f"[ui.info]ℹ  {message}[/]")


def log_warning(message: str, *, target: Optional[Console] = None) -> None:
    (target or console).print(f"[ui.warn]⚠️  {message}[/]")


def log_error(message: str, *, target: Optional[Console] = None) -> None:
    (target or console).print(f"[ui.error]❌ {message}[/]")


def log_success(message: str, *, target: Optional[Console] = None) -> None:
    (target or console).print(f"[ui.success]✅ {message}[/]")
