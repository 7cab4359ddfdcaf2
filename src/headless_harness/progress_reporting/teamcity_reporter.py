"""Line-oriented progress reporting for TeamCity-style CI consumers."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

_LOGGER = logging.getLogger(__name__)

_ESCAPES = (
    ("|", "||"),
    ("'", "|'"),
    ("\n", "|n"),
    ("\r", "|r"),
    ("[", "|["),
    ("]", "|]"),
)


def escape_value(value: str) -> str:
    """Escape a value for use inside a service message attribute."""
    for raw, escaped in _ESCAPES:
        value = value.replace(raw, escaped)
    return value


class ProgressReporter:
    """Emits testStarted/testIgnored/testFailed/testFinished lines when enabled."""

    def __init__(self, *, enabled: bool, name: str, stream: TextIO | None = None) -> None:
        self._enabled = enabled
        self._name = name
        self._stream = stream
        self._opened = False
        self._failed = False
        self._finished = False

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def name(self) -> str:
        return self._name

    def ignored(self, message: str) -> None:
        if self._claim_opening("testIgnored"):
            self._emit("testIgnored", message=message)

    def started(self) -> None:
        if self._claim_opening("testStarted"):
            self._emit("testStarted", captureStandardOutput="true")

    def failed(self, message: str) -> None:
        if self._failed:
            _LOGGER.debug("Ignoring repeated testFailed for %s", self._name)
            return
        self._failed = True
        self._emit("testFailed", message=message)

    def finished(self) -> None:
        if self._finished:
            _LOGGER.debug("Ignoring repeated testFinished for %s", self._name)
            return
        self._finished = True
        self._emit("testFinished")

    def _claim_opening(self, event: str) -> bool:
        if self._opened:
            _LOGGER.debug("Ignoring %s for %s: run already opened", event, self._name)
            return False
        self._opened = True
        return True

    def _emit(self, event: str, **attributes: str) -> None:
        if not self._enabled:
            return
        rendered = " ".join(
            f"{key}='{escape_value(value)}'"
            for key, value in {"name": self._name, **attributes}.items()
        )
        stream = self._stream or sys.stdout
        stream.write(f"##teamcity[{event} {rendered}]\n")
        stream.flush()
