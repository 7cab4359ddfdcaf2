"""Profile loader service."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import (
    DEFAULT_BOOT_SUFFIX,
    DEFAULT_REFERENCE_SUFFIX,
    DEFAULT_RENDER_HEIGHT,
    DEFAULT_RENDER_WIDTH,
    DEFAULT_SLICE_MS,
    DEFAULT_TEST_ROOT_PREFIXES,
    ExitPolicy,
    HarnessSettings,
    Profile,
    SystemSettings,
)

_KNOWN_SECTIONS = ("engine", "run", "reporting", "system")


class ConfigurationError(Exception):
    """Raised when the profile file is invalid."""


def load_profile(profile_path: Path | str | None) -> Profile:
    """Load and validate an optional YAML profile.

    Args:
      profile_path: Path to the profile, or None for built-in defaults.

    Returns:
      The validated profile.

    Raises:
      ConfigurationError: If the file is missing, unparsable or holds invalid values.
    """
    if profile_path is None:
        return Profile.defaults()

    path = Path(profile_path)
    if not path.exists():
        raise ConfigurationError(f"Profile file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse profile file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Profile root must be a mapping.")

    unknown = sorted(str(key) for key in parsed if key not in _KNOWN_SECTIONS)
    if unknown:
        raise ConfigurationError(f"Unknown profile section(s): {', '.join(unknown)}")

    harness = _parse_harness_sections(
        _optional_mapping(parsed.get("engine"), "engine"),
        _optional_mapping(parsed.get("run"), "run"),
        _optional_mapping(parsed.get("reporting"), "reporting"),
    )
    system = _parse_system_section(_optional_mapping(parsed.get("system"), "system"), path.parent)
    return Profile(path=path.resolve(), harness=harness, system=system)


def _parse_harness_sections(
    engine: Mapping[str, Any],
    run: Mapping[str, Any],
    reporting: Mapping[str, Any],
) -> HarnessSettings:
    engine_factory = _optional_string(engine.get("factory"), "engine.factory")
    slice_ms = _require_positive_number(run.get("slice_ms", DEFAULT_SLICE_MS), "run.slice_ms")
    exit_policy_raw = _require_non_empty_string(
        run.get("exit_policy", ExitPolicy.OBSERVED.value), "run.exit_policy"
    ).lower()
    try:
        exit_policy = ExitPolicy(exit_policy_raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"run.exit_policy must be one of: {', '.join(policy.value for policy in ExitPolicy)}."
        ) from exc
    render_width = _require_positive_int(
        run.get("render_width", DEFAULT_RENDER_WIDTH), "run.render_width"
    )
    render_height = _require_positive_int(
        run.get("render_height", DEFAULT_RENDER_HEIGHT), "run.render_height"
    )
    prefixes = _normalize_string_sequence(
        reporting.get("test_root_prefixes", DEFAULT_TEST_ROOT_PREFIXES),
        "reporting.test_root_prefixes",
    )
    boot_suffix = _require_string(
        reporting.get("boot_suffix", DEFAULT_BOOT_SUFFIX), "reporting.boot_suffix"
    )
    reference_suffix = _require_non_empty_string(
        reporting.get("reference_suffix", DEFAULT_REFERENCE_SUFFIX), "reporting.reference_suffix"
    )
    if not reference_suffix.startswith("."):
        raise ConfigurationError("reporting.reference_suffix must start with '.'.")
    return HarnessSettings(
        engine_factory=engine_factory,
        slice_ms=slice_ms,
        exit_policy=exit_policy,
        render_width=render_width,
        render_height=render_height,
        test_root_prefixes=prefixes,
        boot_suffix=boot_suffix,
        reference_suffix=reference_suffix,
    )


def _parse_system_section(section: Mapping[str, Any], base_path: Path) -> SystemSettings:
    values: dict[str, Any] = {}
    for name in (
        "enable_sound",
        "first_run",
        "ignore_bad_memory_access",
        "auto_save_symbol_map",
        "hardware_transform",
        "vertex_cache",
        "true_color",
        "encrypt_save",
    ):
        if name in section:
            values[name] = _require_bool(section[name], f"system.{name}")
    for name in ("rendering_mode", "anisotropy_level", "timezone_offset"):
        if name in section:
            values[name] = _require_int(section[name], f"system.{name}")
    for name in ("lock_parental_level", "internal_resolution"):
        if name in section:
            values[name] = _require_positive_int(section[name], f"system.{name}")
    for name in ("language", "time_format", "nickname", "date_format", "button_preference"):
        if name in section:
            values[name] = _require_non_empty_string(section[name], f"system.{name}")
    if "report_host" in section:
        values["report_host"] = _require_string(section["report_host"], "system.report_host")
    for name in ("memstick_directory", "flash_directory"):
        if name in section:
            raw = _require_non_empty_string(section[name], f"system.{name}")
            values[name] = _resolve_path(base_path, raw)

    unknown = sorted(str(key) for key in section if str(key) not in values)
    if unknown:
        raise ConfigurationError(f"Unknown system setting(s): {', '.join(unknown)}")

    return SystemSettings(**values)


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path).expanduser()
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Profile section '{section_name}' must be a mapping.")
    return value


def _normalize_string_sequence(value: Any, field_name: str) -> tuple[str, ...]:
    if isinstance(value, str):
        stripped = value.strip()
        return (stripped,) if stripped else ()
    if isinstance(value, Sequence):
        normalized = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError(f"{field_name} entries must be strings.")
            stripped = item.strip()
            if stripped:
                normalized.append(stripped)
        return tuple(normalized)
    raise ConfigurationError(f"{field_name} must be a string or list of strings.")


def _require_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    return value.strip()


def _require_non_empty_string(value: Any, field_name: str) -> str:
    stripped = _require_string(value, field_name)
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    return _require_string(value, field_name) or None


def _require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be a boolean.")
    return value


def _require_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    return value


def _require_positive_int(value: Any, field_name: str) -> int:
    number = _require_int(value, field_name)
    if number <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return number


def _require_positive_number(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{field_name} must be a number.")
    if not math.isfinite(value):
        raise ConfigurationError(f"{field_name} must be a finite number.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return float(value)
