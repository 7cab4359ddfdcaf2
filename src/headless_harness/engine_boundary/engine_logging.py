"""Engine log routing for `--log` runs."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

ENGINE_LOGGER_NAME = "headless_harness.engine"
_HARNESS_LOGGER_NAME = "headless_harness"
_SILENT_LEVEL = logging.CRITICAL + 1
_HANDLER_NAME = "headless-harness-stderr"

VERBOSE = 5
# Notices rank above errors.
NOTICE = 45
logging.addLevelName(VERBOSE, "VERBOSE")
logging.addLevelName(NOTICE, "NOTICE")

_LEVEL_LETTERS = (
    (logging.CRITICAL, "E"),
    (NOTICE, "N"),
    (logging.ERROR, "E"),
    (logging.WARNING, "W"),
    (logging.INFO, "I"),
    (logging.DEBUG, "D"),
    (VERBOSE, "V"),
)


class LevelLetterFormatter(logging.Formatter):
    """Prefix each record with a one-letter severity tag."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        return f"{level_letter(record.levelno)} {message}"


def level_letter(levelno: int) -> str:
    for threshold, letter in _LEVEL_LETTERS:
        if levelno >= threshold:
            return letter
    return "N"


def configure_engine_logging(full_log: bool, stream: TextIO | None = None) -> logging.Logger:
    """Install the stderr handler and return the logger handed to the engine.

    Without full logging the engine logger is silenced so only guest output
    reaches the terminal.
    """
    harness_logger = logging.getLogger(_HARNESS_LOGGER_NAME)
    for handler in list(harness_logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            harness_logger.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(LevelLetterFormatter("%(message)s"))
    harness_logger.addHandler(handler)
    harness_logger.propagate = False
    harness_logger.setLevel(logging.DEBUG if full_log else logging.WARNING)

    engine_logger = logging.getLogger(ENGINE_LOGGER_NAME)
    engine_logger.setLevel(VERBOSE if full_log else _SILENT_LEVEL)
    return engine_logger
