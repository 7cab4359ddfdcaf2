"""Contracts shared between the harness and the external emulation engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from headless_harness.configuration.runtime_settings import RunConfiguration, SystemSettings

if TYPE_CHECKING:
    from PIL import Image

    from headless_harness.output_capture.captured_output import GuestOutput


class RunState(str, Enum):
    """Core run status observed by both the execution loop and the engine."""

    RUNNING = "running"
    FRAME_READY = "frame_ready"
    STOPPED = "stopped"


class RunStateSignal:
    """Run status holder shared by the execution loop and the engine.

    The engine marks frames ready and natural completion; the loop consumes
    frames and may request a stop. Only the harness thread touches it.
    """

    def __init__(self, state: RunState = RunState.STOPPED) -> None:
        self._state = state

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == RunState.RUNNING

    @property
    def is_stopped(self) -> bool:
        return self._state == RunState.STOPPED

    def mark_running(self) -> None:
        self._state = RunState.RUNNING

    def mark_frame_ready(self) -> None:
        if self._state == RunState.RUNNING:
            self._state = RunState.FRAME_READY

    def request_stop(self) -> None:
        self._state = RunState.STOPPED

    def consume_frame(self) -> bool:
        """Return True and resume running when a frame was pending."""
        if self._state != RunState.FRAME_READY:
            return False
        self._state = RunState.RUNNING
        return True

    def __repr__(self) -> str:
        return f"RunStateSignal({self._state.value})"


@dataclass(frozen=True)
class EngineStartRequest:
    """Everything the engine receives when it is asked to boot the guest."""

    configuration: RunConfiguration
    system: SystemSettings
    signal: RunStateSignal
    guest_output: GuestOutput
    logger: logging.Logger


@dataclass(frozen=True)
class EngineStartResult:
    """Outcome of asking the engine to load and start the boot image."""

    ok: bool
    error_message: str | None = None

    @staticmethod
    def started() -> EngineStartResult:
        return EngineStartResult(ok=True)

    @staticmethod
    def failed(error_message: str) -> EngineStartResult:
        return EngineStartResult(ok=False, error_message=error_message)


class EmulationEngine(Protocol):
    """Protocol implemented by emulation engines driven by the harness."""

    def initialize(self, request: EngineStartRequest) -> EngineStartResult: ...

    def cycles_for_microseconds(self, microseconds: int) -> int: ...

    def run_for(self, cycles: int) -> None: ...

    def read_framebuffer(self) -> Image.Image | None: ...

    def shutdown(self) -> None: ...
