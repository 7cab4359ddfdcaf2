"""Run execution entities."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from headless_harness.configuration.runtime_settings import (
    CpuCore,
    GraphicsBackend,
    HarnessSettings,
    SystemSettings,
)
from headless_harness.host_backends.screenshot_comparison import ScreenshotComparison
from headless_harness.output_capture.reference_comparison import OutputComparison
from headless_harness.verdicts import Verdict


@dataclass(frozen=True)
class Deadline:
    """Absolute wall-clock instant after which the run is cancelled."""

    expires_at: float | None

    @staticmethod
    def unbounded() -> Deadline:
        return Deadline(expires_at=None)

    @staticmethod
    def after(timeout_seconds: float, now: float) -> Deadline:
        return Deadline(expires_at=now + timeout_seconds)

    @staticmethod
    def from_timeout(timeout_seconds: float | None, now: float) -> Deadline:
        """Negative or missing timeouts never expire."""
        if timeout_seconds is None or timeout_seconds < 0 or math.isinf(timeout_seconds):
            return Deadline.unbounded()
        return Deadline.after(timeout_seconds, now)

    @property
    def is_unbounded(self) -> bool:
        return self.expires_at is None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now > self.expires_at


@dataclass(frozen=True)
class RunRequest:
    """Input contract for executing one headless run."""

    boot_path: str
    mount_path: str | None = None
    cpu_core: CpuCore = CpuCore.JIT
    graphics: GraphicsBackend = GraphicsBackend.NONE
    compare: bool = False
    screenshot_path: str | None = None
    timeout_seconds: float | None = None
    teamcity: bool = False
    harness: HarnessSettings = field(default_factory=HarnessSettings)
    system: SystemSettings = field(default_factory=SystemSettings)


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one completed run."""

    test_name: str
    verdict: Verdict
    exit_code: int
    effective_backend: GraphicsBackend
    timed_out: bool = False
    output_comparison: OutputComparison | None = None
    screenshot_comparison: ScreenshotComparison | None = None

    @property
    def screenshot_failed(self) -> bool:
        return self.screenshot_comparison is not None and not self.screenshot_comparison.passed
