from __future__ import annotations

import io

from progress_reporter import ui


def _console():
    buf = io.StringIO()
    return buf, ui.make_console(file=buf, width=120, color_system=None)


def test_log_info_respects_verbosity():
    buf, con = _console()
    ui.log_info("hidden", target=con)
    assert buf.getvalue() == ""
    ui.set_verbose(True)
    ui.log_info("shown", target=con)
    assert "shown" in buf.getvalue()


def test_log_levels_print_messages():
    buf, con = _console()
    ui.log_warning("careful", target=con)
    ui.log_error("broken", target=con)
    ui.log_success("fine", target=con)
    out = buf.getvalue()
    assert "careful" in out and "broken" in out and "fine" in out


def test_needs_ascii_ui_env_override(monkeypatch):
    monkeypatch.setenv("FORCE_ASCII_UI", "1")
    assert ui.needs_ascii_ui(io.StringIO()) is True
    monkeypatch.delenv("FORCE_ASCII_UI")
    monkeypatch.setattr(ui.os, "name", "posix")
    assert ui.needs_ascii_ui(io.StringIO()) is False


def test_theme_only_carries_styles_the_helpers_use():
    keys = {k for k in ui.THEME.styles if k.startswith("ui.")}
    assert keys == {"ui.info", "ui.success", "ui.warn", "ui.error"}
