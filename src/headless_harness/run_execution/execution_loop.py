"""Bounded slice loop with cooperative timeout cancellation."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from headless_harness.engine_boundary.engine_contracts import RunStateSignal

from .run_contracts import Deadline

_LOGGER = logging.getLogger(__name__)

Clock = Callable[[], float]


class SliceRunner(Protocol):  # pylint: disable=too-few-public-methods
    """Subset of the engine API needed by the loop."""

    def run_for(self, cycles: int) -> None: ...


class FramePresenter(Protocol):  # pylint: disable=too-few-public-methods
    """Subset of the host API needed by the loop."""

    def swap_buffers(self) -> None: ...


def run_until_stopped(
    engine: SliceRunner,
    signal: RunStateSignal,
    host: FramePresenter,
    *,
    deadline: Deadline,
    slice_cycles: int,
    clock: Clock,
    on_timeout: Callable[[], None],
) -> bool:
    """Drive the engine one slice at a time until the run state is stopped.

    Returns True when the deadline tripped and the stop was requested by the
    loop rather than by the guest program finishing. The deadline is only
    checked between slices, so a timeout can overshoot by one slice.
    """
    slices = 0
    while signal.is_running:
        engine.run_for(slice_cycles)
        slices += 1

        if signal.consume_frame():
            host.swap_buffers()

        # A guest that stops in the slice where the deadline expires has
        # completed; the deadline is only consulted for a guest still running.
        if signal.is_stopped:
            break

        if deadline.is_expired(clock()):
            _LOGGER.debug("Deadline expired after %d slices", slices)
            on_timeout()
            signal.request_stop()
            return True

    _LOGGER.debug("Guest stopped after %d slices", slices)
    return False
