"""Final classification of one headless test run."""

from __future__ import annotations

from enum import Enum


class Verdict(str, Enum):
    """Run verdict computed once after the execution loop exits."""

    PASSED = "passed"
    CONTENT_MISMATCH = "content_mismatch"
    REFERENCE_MISSING = "reference_missing"
    TIMED_OUT = "timed_out"
    INIT_FAILED = "init_failed"
    COMPLETED = "completed"

    @property
    def is_failure(self) -> bool:
        """Return True for verdicts that a strict exit policy treats as failing."""
        return self not in (Verdict.PASSED, Verdict.COMPLETED)
