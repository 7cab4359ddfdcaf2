"""Host abstraction contract and the no-backend host."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from headless_harness.configuration.runtime_settings import GraphicsBackend

if TYPE_CHECKING:
    from PIL import Image

    from .screenshot_comparison import ScreenshotComparison

FrameReader = Callable[[], "Image.Image | None"]

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphicsInitResult:
    """Outcome of creating the graphics context."""

    ok: bool
    error_message: str | None = None

    @staticmethod
    def ready() -> GraphicsInitResult:
        return GraphicsInitResult(ok=True)

    @staticmethod
    def failed(error_message: str) -> GraphicsInitResult:
        return GraphicsInitResult(ok=False, error_message=error_message)


class HeadlessHost:
    """Host services with no graphics backend.

    Debug output is buffered until a newline arrives and then written to
    stdout, so partial lines from the guest never interleave with reporter
    lines.
    """

    backend = GraphicsBackend.NONE

    def __init__(
        self,
        *,
        frame_reader: FrameReader | None = None,
        width: int = 480,
        height: int = 272,
        stdout: TextIO | None = None,
    ) -> None:
        self._frame_reader = frame_reader
        self._width = width
        self._height = height
        self._stdout = stdout
        self._debug_buffer: list[str] = []
        self._comparison_screenshot: Path | None = None
        self._screenshot_result: ScreenshotComparison | None = None

    @property
    def comparison_screenshot(self) -> Path | None:
        return self._comparison_screenshot

    @property
    def screenshot_result(self) -> ScreenshotComparison | None:
        return self._screenshot_result

    def init_graphics(self) -> GraphicsInitResult:
        return GraphicsInitResult.failed("no graphics backend selected")

    def boot_done(self) -> None:
        _LOGGER.debug("Boot finished on %s host", self.backend.value)

    def swap_buffers(self) -> None:
        """No frame is presented without a graphics backend."""

    def set_comparison_screenshot(self, path: str | Path) -> None:
        self._comparison_screenshot = Path(path)

    def send_debug_output(self, text: str) -> None:
        if "\n" in text:
            self._flush_debug_buffer()
            self._write(text)
        else:
            self._debug_buffer.append(text)

    def flush_debug_output(self) -> None:
        self._flush_debug_buffer()

    def shutdown_graphics(self) -> None:
        """Nothing to release without a graphics backend."""

    def _flush_debug_buffer(self) -> None:
        if not self._debug_buffer:
            return
        pending = "".join(self._debug_buffer)
        self._debug_buffer.clear()
        self._write(pending)

    def _write(self, text: str) -> None:
        stream = self._stdout or sys.stdout
        stream.write(text)
        stream.flush()
