"""Runtime selection of the host backend."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from headless_harness.configuration.runtime_settings import GraphicsBackend

from .graphical_hosts import GlesHost, NativeHost, SoftwareHost
from .host_contracts import FrameReader, HeadlessHost

_LOGGER = logging.getLogger(__name__)

_HOSTS_BY_BACKEND: dict[GraphicsBackend, type[HeadlessHost]] = {
    GraphicsBackend.NONE: HeadlessHost,
    GraphicsBackend.GLES: GlesHost,
    GraphicsBackend.SOFTWARE: SoftwareHost,
    GraphicsBackend.DIRECTX9: NativeHost,
}

_WINDOWS_ONLY = frozenset({GraphicsBackend.DIRECTX9})


def available_backends(platform: str | None = None) -> tuple[GraphicsBackend, ...]:
    """Backends that can be selected on the given platform."""
    resolved_platform = platform or sys.platform
    return tuple(
        backend
        for backend in _HOSTS_BY_BACKEND
        if backend not in _WINDOWS_ONLY or resolved_platform.startswith("win")
    )


def select_host(
    backend: GraphicsBackend,
    *,
    frame_reader: FrameReader | None = None,
    width: int = 480,
    height: int = 272,
    platform: str | None = None,
    stdout: TextIO | None = None,
) -> HeadlessHost:
    """Build the host for a backend without creating any graphics context.

    Backends unavailable on the platform fall back to the no-backend host.
    """
    if backend not in available_backends(platform):
        _LOGGER.warning("Graphics backend %s is unavailable here; using none", backend.value)
        backend = GraphicsBackend.NONE
    host_cls = _HOSTS_BY_BACKEND[backend]
    return host_cls(frame_reader=frame_reader, width=width, height=height, stdout=stdout)
