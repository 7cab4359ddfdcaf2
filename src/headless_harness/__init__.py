"""Headless test driver for emulation engines."""

from .verdicts import Verdict

__all__ = ["Verdict"]
