"""Guest program output sink."""

from __future__ import annotations

import sys
from typing import TextIO


class GuestOutput:
    """Receives guest text output and either collects it or passes it through."""

    def __init__(self, *, capture: bool, stream: TextIO | None = None) -> None:
        self._capture = capture
        self._stream = stream
        self._chunks: list[str] = []

    @property
    def capturing(self) -> bool:
        return self._capture

    @property
    def text(self) -> str:
        return "".join(self._chunks)

    def write(self, text: str) -> None:
        if not text:
            return
        if self._capture:
            self._chunks.append(text)
            return
        stream = self._stream or sys.stdout
        stream.write(text)
        stream.flush()

    def flush_to(self, stream: TextIO | None = None) -> None:
        """Print whatever has been collected so far."""
        target = stream or self._stream or sys.stdout
        target.write(self.text)
        target.flush()
