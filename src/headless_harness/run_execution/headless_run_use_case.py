"""Headless run use-case service."""

from __future__ import annotations

import logging
import math
import sys
import time
from dataclasses import dataclass, replace
from typing import TextIO

from headless_harness.configuration.runtime_settings import (
    ExitPolicy,
    GraphicsBackend,
    RunConfiguration,
)
from headless_harness.engine_boundary.engine_contracts import (
    EmulationEngine,
    EngineStartRequest,
    RunStateSignal,
)
from headless_harness.engine_boundary.engine_loader import EngineFactory
from headless_harness.engine_boundary.engine_logging import ENGINE_LOGGER_NAME
from headless_harness.host_backends.host_contracts import HeadlessHost
from headless_harness.host_backends.host_selection import select_host
from headless_harness.output_capture.captured_output import GuestOutput
from headless_harness.output_capture.reference_comparison import (
    OutputComparison,
    compare_output,
)
from headless_harness.progress_reporting.run_identity import derive_test_identity
from headless_harness.progress_reporting.teamcity_reporter import ProgressReporter
from headless_harness.verdicts import Verdict

from .execution_loop import Clock, run_until_stopped
from .run_contracts import Deadline, RunOutcome, RunRequest

_LOGGER = logging.getLogger(__name__)

INIT_FAILURE_MARKER = "TESTERROR"
IGNORED_MESSAGE = "PRX/ELF missing"
TIMEOUT_MESSAGE = "Test timeout"


class RunExecutionError(Exception):
    """Raised when a run request cannot be executed."""


@dataclass
class _RunProgress:
    """Mutable bookkeeping for one run, read by the teardown."""

    engine_started: bool = False
    timed_out: bool = False


def execute_headless_run(
    request: RunRequest,
    *,
    engine_factory: EngineFactory,
    clock: Clock = time.monotonic,
    platform: str | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> RunOutcome:
    """Execute one headless run and return its outcome.

    Graphics context release, engine shutdown and the final debug-output flush
    happen exactly once whichever path ends the run; `testFinished` is always
    the last reporter line.
    """
    _validate_request(request)
    out = stdout or sys.stdout
    err = stderr or sys.stderr
    harness = request.harness
    test_name = derive_test_identity(
        request.boot_path, harness.test_root_prefixes, harness.boot_suffix
    )
    reporter = ProgressReporter(enabled=request.teamcity, name=test_name, stream=out)

    engine = engine_factory()
    host = select_host(
        request.graphics,
        frame_reader=engine.read_framebuffer,
        width=harness.render_width,
        height=harness.render_height,
        platform=platform,
        stdout=out,
    )
    configuration = _build_run_configuration(request, host)
    guest_output = GuestOutput(capture=configuration.collect_guest_output, stream=out)
    progress = _RunProgress()

    try:
        graphics = host.init_graphics()
        if not graphics.ok:
            if request.graphics != GraphicsBackend.NONE:
                _LOGGER.info(
                    "Graphics backend %s unavailable (%s); continuing without graphics",
                    host.backend.value,
                    graphics.error_message,
                )
            configuration = replace(configuration, effective_backend=GraphicsBackend.NONE)
        try:
            _boot_and_run(
                request,
                engine=engine,
                host=host,
                configuration=configuration,
                guest_output=guest_output,
                reporter=reporter,
                progress=progress,
                clock=clock,
                stdout=out,
                stderr=err,
            )
        finally:
            host.shutdown_graphics()
            if progress.engine_started:
                engine.shutdown()
            host.flush_debug_output()

        verdict, output_comparison = _resolve_verdict(
            request, progress, guest_output, test_name, stdout=out, stderr=err
        )
    finally:
        reporter.finished()

    outcome = RunOutcome(
        test_name=test_name,
        verdict=verdict,
        exit_code=0,
        effective_backend=configuration.effective_backend,
        timed_out=progress.timed_out,
        output_comparison=output_comparison,
        screenshot_comparison=host.screenshot_result,
    )
    return replace(outcome, exit_code=_exit_code_for(outcome, harness.exit_policy))


def _validate_request(request: RunRequest) -> None:
    if not request.boot_path:
        raise RunExecutionError("No executable specified")
    if request.timeout_seconds is not None and math.isnan(request.timeout_seconds):
        raise RunExecutionError("Timeout must be a number of seconds.")
    if request.harness.slice_microseconds <= 0:
        raise RunExecutionError("Slice duration must be at least one microsecond.")


def _build_run_configuration(request: RunRequest, host: HeadlessHost) -> RunConfiguration:
    harness = request.harness
    return RunConfiguration(
        boot_path=request.boot_path,
        mount_path=request.mount_path,
        cpu_core=request.cpu_core,
        requested_backend=request.graphics,
        effective_backend=host.backend,
        collect_guest_output=request.compare,
        render_width=harness.render_width,
        render_height=harness.render_height,
        output_width=harness.render_width,
        output_height=harness.render_height,
        pixel_width=harness.render_width,
        pixel_height=harness.render_height,
    )


def _boot_and_run(
    request: RunRequest,
    *,
    engine: EmulationEngine,
    host: HeadlessHost,
    configuration: RunConfiguration,
    guest_output: GuestOutput,
    reporter: ProgressReporter,
    progress: _RunProgress,
    clock: Clock,
    stdout: TextIO,
    stderr: TextIO,
) -> None:
    signal = RunStateSignal()
    started = engine.initialize(
        EngineStartRequest(
            configuration=configuration,
            system=request.system,
            signal=signal,
            guest_output=guest_output,
            logger=logging.getLogger(ENGINE_LOGGER_NAME),
        )
    )
    if not started.ok:
        stderr.write(f"Failed to start {request.boot_path}. Error: {started.error_message}\n")
        stdout.write(f"{INIT_FAILURE_MARKER}\n")
        reporter.ignored(IGNORED_MESSAGE)
        return
    progress.engine_started = True

    reporter.started()
    host.boot_done()
    if request.screenshot_path:
        host.set_comparison_screenshot(request.screenshot_path)

    slice_cycles = engine.cycles_for_microseconds(request.harness.slice_microseconds)
    if slice_cycles <= 0:
        raise RunExecutionError(f"Engine reported {slice_cycles} cycles for one slice.")

    def _on_timeout() -> None:
        guest_output.flush_to(stdout)
        progress.timed_out = True
        host.send_debug_output("TIMEOUT\n")
        reporter.failed(TIMEOUT_MESSAGE)

    deadline = Deadline.from_timeout(request.timeout_seconds, clock())
    signal.mark_running()
    run_until_stopped(
        engine,
        signal,
        host,
        deadline=deadline,
        slice_cycles=slice_cycles,
        clock=clock,
        on_timeout=_on_timeout,
    )


def _resolve_verdict(
    request: RunRequest,
    progress: _RunProgress,
    guest_output: GuestOutput,
    test_name: str,
    *,
    stdout: TextIO,
    stderr: TextIO,
) -> tuple[Verdict, OutputComparison | None]:
    if not progress.engine_started:
        return Verdict.INIT_FAILED, None
    if progress.timed_out:
        return Verdict.TIMED_OUT, None
    if not request.compare:
        return Verdict.COMPLETED, None
    comparison = compare_output(
        request.boot_path,
        guest_output.text,
        suffix=request.harness.reference_suffix,
        test_name=test_name,
        stdout=stdout,
        stderr=stderr,
    )
    return comparison.verdict, comparison


def _exit_code_for(outcome: RunOutcome, policy: ExitPolicy) -> int:
    if outcome.verdict == Verdict.INIT_FAILED:
        return 1
    if policy == ExitPolicy.STRICT and (outcome.verdict.is_failure or outcome.screenshot_failed):
        return 1
    return 0
