"""Configuration domain entities."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

DEFAULT_RENDER_WIDTH = 480
DEFAULT_RENDER_HEIGHT = 272
DEFAULT_SLICE_MS = 100.0
DEFAULT_TEST_ROOT_PREFIXES = ("tests/", "pspautotests/tests/")
DEFAULT_BOOT_SUFFIX = ".prx"
DEFAULT_REFERENCE_SUFFIX = ".expected"


class CpuCore(str, Enum):
    """Guest instruction execution mode."""

    INTERPRETER = "interpreter"
    JIT = "jit"


class GraphicsBackend(str, Enum):
    """Graphics backend requested on the command line."""

    GLES = "gles"
    SOFTWARE = "software"
    DIRECTX9 = "directx9"
    NONE = "none"

    @classmethod
    def parse(cls, value: str) -> GraphicsBackend:
        normalized = value.strip().lower()
        if normalized == "null":
            return cls.NONE
        try:
            return cls(normalized)
        except ValueError as exc:
            raise ValueError(f"Unknown graphics backend: {value}") from exc


class ExitPolicy(str, Enum):
    """How the final verdict maps to the process exit code."""

    OBSERVED = "observed"
    STRICT = "strict"


@dataclass(frozen=True)
class RunConfiguration:
    """Immutable parameters handed to the engine when it starts."""

    boot_path: str
    mount_path: str | None = None
    cpu_core: CpuCore = CpuCore.JIT
    requested_backend: GraphicsBackend = GraphicsBackend.NONE
    effective_backend: GraphicsBackend = GraphicsBackend.NONE
    collect_guest_output: bool = False
    render_width: int = DEFAULT_RENDER_WIDTH
    render_height: int = DEFAULT_RENDER_HEIGHT
    output_width: int = DEFAULT_RENDER_WIDTH
    output_height: int = DEFAULT_RENDER_HEIGHT
    pixel_width: int = DEFAULT_RENDER_WIDTH
    pixel_height: int = DEFAULT_RENDER_HEIGHT
    enable_sound: bool = False
    enable_debugging: bool = False
    start_paused: bool = False
    headless: bool = True
    unthrottle: bool = True

    @property
    def print_guest_output(self) -> bool:
        """Guest output goes straight to stdout unless it is being collected."""
        return not self.collect_guest_output


def _default_memstick_directory() -> Path:
    return Path(os.path.expanduser("~")) / ".ppsspp"


@dataclass(frozen=True)
class SystemSettings:
    """Static emulated-system settings applied before boot."""

    enable_sound: bool = False
    first_run: bool = False
    ignore_bad_memory_access: bool = True
    report_host: str = ""
    auto_save_symbol_map: bool = False
    rendering_mode: int = 0
    hardware_transform: bool = True
    anisotropy_level: int = 8
    vertex_cache: bool = True
    true_color: bool = True
    language: str = "english"
    time_format: str = "24hr"
    encrypt_save: bool = True
    nickname: str = "shadow"
    timezone_offset: int = 60
    date_format: str = "ddmmyyyy"
    button_preference: str = "cross"
    lock_parental_level: int = 9
    internal_resolution: int = 1
    memstick_directory: Path = field(default_factory=_default_memstick_directory)
    flash_directory: Path | None = None

    @property
    def resolved_flash_directory(self) -> Path:
        if self.flash_directory is not None:
            return self.flash_directory
        return self.memstick_directory / "flash"


@dataclass(frozen=True)
class HarnessSettings:
    """Settings that shape the harness itself rather than the emulated system."""

    engine_factory: str | None = None
    slice_ms: float = DEFAULT_SLICE_MS
    exit_policy: ExitPolicy = ExitPolicy.OBSERVED
    render_width: int = DEFAULT_RENDER_WIDTH
    render_height: int = DEFAULT_RENDER_HEIGHT
    test_root_prefixes: tuple[str, ...] = DEFAULT_TEST_ROOT_PREFIXES
    boot_suffix: str = DEFAULT_BOOT_SUFFIX
    reference_suffix: str = DEFAULT_REFERENCE_SUFFIX

    @property
    def slice_microseconds(self) -> int:
        return int(self.slice_ms * 1000)


@dataclass(frozen=True)
class Profile:
    """Optional YAML profile contents."""

    path: Path | None
    harness: HarnessSettings
    system: SystemSettings

    @staticmethod
    def defaults() -> Profile:
        return Profile(path=None, harness=HarnessSettings(), system=SystemSettings())
