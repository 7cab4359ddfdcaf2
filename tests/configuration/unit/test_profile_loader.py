"""Tests for the profile loader."""

from __future__ import annotations

from pathlib import Path

import pytest
from headless_harness.configuration import (
    ConfigurationError,
    ExitPolicy,
    HarnessSettings,
    SystemSettings,
    load_profile,
)


def _write_profile(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "profile.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_no_profile_returns_builtin_defaults() -> None:
    profile = load_profile(None)

    assert profile.path is None
    assert profile.harness == HarnessSettings()
    assert profile.system.nickname == "shadow"


def test_empty_profile_file_uses_defaults(tmp_path: Path) -> None:
    profile = load_profile(_write_profile(tmp_path, ""))

    assert profile.harness.slice_ms == 100.0
    assert profile.harness.exit_policy == ExitPolicy.OBSERVED
    assert profile.harness.test_root_prefixes == ("tests/", "pspautotests/tests/")


def test_full_profile_is_parsed(tmp_path: Path) -> None:
    path = _write_profile(
        tmp_path,
        """
engine:
  factory: "fake_engines:create"
run:
  slice_ms: 16.5
  exit_policy: STRICT
  render_width: 960
  render_height: 544
reporting:
  test_root_prefixes: ["suite/"]
  boot_suffix: ".elf"
  reference_suffix: ".golden"
system:
  nickname: "tester"
  timezone_offset: -120
  encrypt_save: false
  memstick_directory: "memstick"
""",
    )

    profile = load_profile(path)

    assert profile.harness.engine_factory == "fake_engines:create"
    assert profile.harness.slice_ms == 16.5
    assert profile.harness.slice_microseconds == 16500
    assert profile.harness.exit_policy == ExitPolicy.STRICT
    assert (profile.harness.render_width, profile.harness.render_height) == (960, 544)
    assert profile.harness.test_root_prefixes == ("suite/",)
    assert profile.harness.boot_suffix == ".elf"
    assert profile.harness.reference_suffix == ".golden"
    assert profile.system.nickname == "tester"
    assert profile.system.timezone_offset == -120
    assert profile.system.encrypt_save is False
    assert profile.system.memstick_directory == (tmp_path / "memstick").resolve()
    assert profile.system.resolved_flash_directory == (tmp_path / "memstick" / "flash").resolve()


def test_missing_profile_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Profile file not found"):
        load_profile(tmp_path / "absent.yaml")


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Failed to parse profile file"):
        load_profile(_write_profile(tmp_path, "run: [unclosed"))


def test_non_mapping_root_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="root must be a mapping"):
        load_profile(_write_profile(tmp_path, "- a\n- b\n"))


def test_unknown_section_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Unknown profile section"):
        load_profile(_write_profile(tmp_path, "graphics: {}\n"))


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("run:\n  slice_ms: 0\n", "run.slice_ms must be greater than zero"),
        ("run:\n  slice_ms: fast\n", "run.slice_ms must be a number"),
        ("run:\n  slice_ms: .nan\n", "run.slice_ms must be a finite number"),
        ("run:\n  slice_ms: .inf\n", "run.slice_ms must be a finite number"),
        ("run:\n  exit_policy: sometimes\n", "run.exit_policy must be one of"),
        ("run:\n  render_width: true\n", "run.render_width must be an integer"),
        ("reporting:\n  reference_suffix: expected\n", "must start with '.'"),
        ("reporting:\n  test_root_prefixes: [1]\n", "entries must be strings"),
        ("system:\n  nickname: 3\n", "system.nickname must be a string"),
        ("system:\n  vertex_cache: yes please\n", "system.vertex_cache must be a boolean"),
        ("system:\n  warp_speed: 9\n", "Unknown system setting"),
        ("engine: fake\n", "'engine' must be a mapping"),
    ],
)
def test_invalid_values_are_reported_with_field_name(
    tmp_path: Path, text: str, message: str
) -> None:
    with pytest.raises(ConfigurationError, match=message):
        load_profile(_write_profile(tmp_path, text))


def test_system_defaults_match_static_test_environment() -> None:
    settings = SystemSettings()

    assert settings.enable_sound is False
    assert settings.ignore_bad_memory_access is True
    assert settings.report_host == ""
    assert settings.lock_parental_level == 9
    assert settings.language == "english"
    assert settings.memstick_directory.name == ".ppsspp"
