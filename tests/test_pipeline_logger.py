from __future__ import annotations

import logging

import pytest

from fontshelf.fonts import logging as pipeline_logging
from fontshelf.fonts.logging import FontPipelineLogger


@pytest.fixture(autouse=True)
def _no_cli_state(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(pipeline_logging, "_resolve_state", lambda: None)


def test_info_is_echoed_and_logged(capsys, caplog) -> None:
    caplog.set_level(logging.INFO, logger="fontshelf")

    FontPipelineLogger().info("Resolved %s (%d faces)", "Inter", 2)

    assert capsys.readouterr().out == "Resolved Inter (2 faces)\n"
    assert "Resolved Inter (2 faces)" in caplog.messages


def test_quiet_logger_only_forwards_to_logging(capsys, caplog) -> None:
    caplog.set_level(logging.INFO, logger="fontshelf")

    FontPipelineLogger(quiet=True).info("hidden")

    assert capsys.readouterr().out == ""
    assert caplog.messages == ["hidden"]


def test_debug_requires_verbose(capsys) -> None:
    FontPipelineLogger().debug("quiet detail")
    FontPipelineLogger(verbose=True).debug("loud detail")

    assert capsys.readouterr().out == "loud detail\n"


def test_warning_goes_to_stderr(capsys) -> None:
    FontPipelineLogger(quiet=True).warning("No font faces found for '%s'.", "Ghost")

    assert "No font faces found for 'Ghost'." in capsys.readouterr().err


def test_quiet_progress_is_a_no_op() -> None:
    with FontPipelineLogger(quiet=True).progress("Work", total=3) as advance:
        advance(1)
        advance()
