"""CLI usage tests."""

from __future__ import annotations

from headless_harness.cli import main


def test_help_prints_usage_to_stderr_and_exits_one(capsys) -> None:
    exit_code = main(["--help"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert captured.out == ""
    assert "Usage: headless" in captured.err
    for option in ("--mount", "--log", "--compare", "--graphics", "--screenshot", "--timeout"):
        assert option in captured.err
    assert "--teamcity" in captured.err


def test_short_help_flag_matches_long_flag(capsys) -> None:
    assert main(["-h"]) == 1
    assert "Usage: headless" in capsys.readouterr().err


def test_no_arguments_prints_usage_without_error_reason(capsys) -> None:
    exit_code = main([])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Usage: headless" in captured.err
    assert "Error:" not in captured.err
