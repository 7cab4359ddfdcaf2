"""Tests for the guest output sink."""

from __future__ import annotations

import io

from headless_harness.output_capture import GuestOutput


def test_pass_through_writes_directly_to_stdout(capsys) -> None:
    output = GuestOutput(capture=False)

    output.write("hello ")
    output.write("world\n")

    assert capsys.readouterr().out == "hello world\n"
    assert output.text == ""


def test_capture_collects_instead_of_printing(capsys) -> None:
    output = GuestOutput(capture=True)

    output.write("a")
    output.write("")
    output.write("b\n")

    assert capsys.readouterr().out == ""
    assert output.capturing is True
    assert output.text == "ab\n"


def test_flush_to_prints_collected_text() -> None:
    stream = io.StringIO()
    output = GuestOutput(capture=True, stream=stream)
    output.write("partial")

    output.flush_to()

    assert stream.getvalue() == "partial"
    assert output.text == "partial"
