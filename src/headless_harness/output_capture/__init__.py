"""Output capture domain exports."""

from .captured_output import GuestOutput
from .reference_comparison import OutputComparison, compare_output, reference_path_for

__all__ = [
    "GuestOutput",
    "OutputComparison",
    "compare_output",
    "reference_path_for",
]
