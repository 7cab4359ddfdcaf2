"""Run execution domain exports."""

from .execution_loop import run_until_stopped
from .headless_run_use_case import RunExecutionError, execute_headless_run
from .run_contracts import Deadline, RunOutcome, RunRequest

__all__ = [
    "Deadline",
    "RunRequest",
    "RunOutcome",
    "RunExecutionError",
    "execute_headless_run",
    "run_until_stopped",
]
