"""Hosts backed by a real graphics backend."""

from __future__ import annotations

import logging
import os
from types import ModuleType

from headless_harness.configuration.runtime_settings import GraphicsBackend

from .host_contracts import GraphicsInitResult, HeadlessHost
from .screenshot_comparison import compare_screenshot

_LOGGER = logging.getLogger(__name__)


class GraphicalHost(HeadlessHost):
    """Host that presents frames and can compare one against a screenshot."""

    def swap_buffers(self) -> None:
        self._present()
        if self._comparison_screenshot is None:
            return
        frame = self._frame_reader() if self._frame_reader else None
        result = compare_screenshot(frame, self._comparison_screenshot)
        self._screenshot_result = result
        self._comparison_screenshot = None
        if not result.passed:
            self.send_debug_output(result.describe())
        _LOGGER.info(
            "Screenshot comparison against %s: %s",
            result.reference_path,
            result.describe().strip(),
        )

    def _present(self) -> None:
        """Hand the finished frame to the backend."""


class SoftwareHost(GraphicalHost):
    """Frames are rendered into memory by the engine; no native context is needed."""

    backend = GraphicsBackend.SOFTWARE

    def init_graphics(self) -> GraphicsInitResult:
        return GraphicsInitResult.ready()


class _HiddenWindowHost(GraphicalHost):
    """Creates its context through a hidden pygame window."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._pygame: ModuleType | None = None

    def init_graphics(self) -> GraphicsInitResult:
        try:
            import pygame  # pylint: disable=import-outside-toplevel
        except ImportError as exc:
            return GraphicsInitResult.failed(f"pygame is not available: {exc}")
        self._prepare_environment()
        try:
            pygame.display.init()
            pygame.display.set_mode((self._width, self._height), self._window_flags(pygame))
        except pygame.error as exc:
            pygame.display.quit()
            return GraphicsInitResult.failed(str(exc))
        self._pygame = pygame
        return GraphicsInitResult.ready()

    def shutdown_graphics(self) -> None:
        if self._pygame is None:
            return
        self._pygame.display.quit()
        self._pygame = None

    def _present(self) -> None:
        if self._pygame is not None:
            self._pygame.display.flip()

    def _prepare_environment(self) -> None:
        """Set SDL hints before the display is initialized."""

    def _window_flags(self, pygame: ModuleType) -> int:
        return int(pygame.HIDDEN)


class GlesHost(_HiddenWindowHost):
    """OpenGL context in a hidden window."""

    backend = GraphicsBackend.GLES

    def _window_flags(self, pygame: ModuleType) -> int:
        return int(pygame.OPENGL | pygame.DOUBLEBUF | pygame.HIDDEN)


class NativeHost(_HiddenWindowHost):
    """Direct3D renderer in a hidden window; Windows only."""

    backend = GraphicsBackend.DIRECTX9

    def _prepare_environment(self) -> None:
        os.environ.setdefault("SDL_RENDER_DRIVER", "direct3d")
