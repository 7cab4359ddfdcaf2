"""Shared fakes for the engine boundary."""

from __future__ import annotations

from collections.abc import Callable, Sequence

import pytest
from headless_harness.engine_boundary.engine_contracts import (
    EngineStartRequest,
    EngineStartResult,
)
from PIL import Image


class ScriptedEngine:
    """Engine double that replays scripted guest behaviour one slice at a time."""

    def __init__(
        self,
        *,
        start_error: str | None = None,
        outputs: Sequence[str] = (),
        stop_after: int | None = None,
        frame_every: int | None = None,
        frame: Image.Image | None = None,
        cycles_per_microsecond: int = 222,
        on_slice: Callable[[ScriptedEngine], None] | None = None,
    ) -> None:
        self.start_error = start_error
        self.outputs = list(outputs)
        self.stop_after = stop_after
        self.frame_every = frame_every
        self.frame = frame
        self.cycles_per_microsecond = cycles_per_microsecond
        self.on_slice = on_slice
        self.request: EngineStartRequest | None = None
        self.slices = 0
        self.slice_cycles: list[int] = []
        self.calls: list[str] = []

    def initialize(self, request: EngineStartRequest) -> EngineStartResult:
        self.calls.append("initialize")
        self.request = request
        if self.start_error is not None:
            return EngineStartResult.failed(self.start_error)
        return EngineStartResult.started()

    def cycles_for_microseconds(self, microseconds: int) -> int:
        return microseconds * self.cycles_per_microsecond

    def run_for(self, cycles: int) -> None:
        assert self.request is not None
        self.slice_cycles.append(cycles)
        if self.slices < len(self.outputs):
            self.request.guest_output.write(self.outputs[self.slices])
        self.slices += 1
        if self.frame_every and self.slices % self.frame_every == 0:
            self.request.signal.mark_frame_ready()
        if self.on_slice is not None:
            self.on_slice(self)
        if self.stop_after is not None and self.slices >= self.stop_after:
            self.request.signal.request_stop()

    def read_framebuffer(self) -> Image.Image | None:
        self.calls.append("read_framebuffer")
        return self.frame

    def shutdown(self) -> None:
        self.calls.append("shutdown")


class FakeClock:
    """Monotonic clock that advances a fixed step on every read."""

    def __init__(self, step: float = 1.0, start: float = 0.0) -> None:
        self.step = step
        self.now = start
        self.reads = 0

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        self.reads += 1
        return value


@pytest.fixture
def make_engine() -> Callable[..., ScriptedEngine]:
    return ScriptedEngine


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
