"""Tests for runtime host selection."""

from __future__ import annotations

import sys

import pytest
from headless_harness.configuration import GraphicsBackend
from headless_harness.host_backends import (
    GlesHost,
    HeadlessHost,
    NativeHost,
    SoftwareHost,
    available_backends,
    select_host,
)


@pytest.mark.parametrize(
    ("backend", "host_cls"),
    [
        (GraphicsBackend.NONE, HeadlessHost),
        (GraphicsBackend.GLES, GlesHost),
        (GraphicsBackend.SOFTWARE, SoftwareHost),
    ],
)
def test_backend_maps_to_host(backend: GraphicsBackend, host_cls: type[HeadlessHost]) -> None:
    host = select_host(backend, platform="linux")

    assert type(host) is host_cls
    assert host.backend == backend


def test_native_backend_is_windows_only() -> None:
    assert GraphicsBackend.DIRECTX9 in available_backends("win32")
    assert GraphicsBackend.DIRECTX9 not in available_backends("linux")
    assert type(select_host(GraphicsBackend.DIRECTX9, platform="win32")) is NativeHost


def test_unavailable_backend_falls_back_to_no_backend_host() -> None:
    host = select_host(GraphicsBackend.DIRECTX9, platform="darwin")

    assert type(host) is HeadlessHost
    assert host.backend == GraphicsBackend.NONE


def test_selection_never_touches_native_graphics(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "pygame", None)

    for backend in GraphicsBackend:
        select_host(backend, platform="win32")

    none_host = select_host(GraphicsBackend.NONE)
    result = none_host.init_graphics()
    assert result.ok is False
    assert result.error_message == "no graphics backend selected"
