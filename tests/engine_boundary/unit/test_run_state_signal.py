"""Tests for the shared run state signal."""

from __future__ import annotations

from headless_harness.engine_boundary import RunState, RunStateSignal


def test_signal_starts_stopped_until_the_loop_marks_it_running() -> None:
    signal = RunStateSignal()

    assert signal.is_stopped
    signal.mark_running()
    assert signal.is_running


def test_frame_ready_is_consumed_back_to_running() -> None:
    signal = RunStateSignal(RunState.RUNNING)

    signal.mark_frame_ready()
    assert signal.state == RunState.FRAME_READY
    assert signal.consume_frame() is True
    assert signal.state == RunState.RUNNING
    assert signal.consume_frame() is False


def test_stop_request_is_not_undone_by_a_late_frame() -> None:
    signal = RunStateSignal(RunState.RUNNING)

    signal.request_stop()
    signal.mark_frame_ready()

    assert signal.is_stopped
    assert signal.consume_frame() is False
