"""Progress reporting domain exports."""

from .teamcity_reporter import ProgressReporter, escape_value
from .run_identity import derive_test_identity

__all__ = ["ProgressReporter", "derive_test_identity", "escape_value"]
