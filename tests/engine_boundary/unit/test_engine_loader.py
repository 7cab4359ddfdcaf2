"""Tests for engine factory resolution."""

from __future__ import annotations

import sys
import types

import pytest
from headless_harness.engine_boundary import EngineLoadError, load_engine_factory


@pytest.fixture
def fake_engine_module(monkeypatch: pytest.MonkeyPatch) -> types.ModuleType:
    module = types.ModuleType("fake_engine_pkg")

    def create_engine() -> str:
        return "engine"

    module.create_engine = create_engine  # type: ignore[attr-defined]
    module.factories = types.SimpleNamespace(default=create_engine)  # type: ignore[attr-defined]
    module.NOT_CALLABLE = 42  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "fake_engine_pkg", module)
    return module


def test_reference_resolves_module_attribute(fake_engine_module: types.ModuleType) -> None:
    factory = load_engine_factory("fake_engine_pkg:create_engine")

    assert factory() == "engine"


def test_reference_resolves_nested_attribute(fake_engine_module: types.ModuleType) -> None:
    factory = load_engine_factory("fake_engine_pkg:factories.default")

    assert factory is fake_engine_module.create_engine


@pytest.mark.parametrize("reference", ["fake_engine_pkg", ":create", "fake_engine_pkg:"])
def test_malformed_reference_raises(reference: str) -> None:
    with pytest.raises(EngineLoadError, match="must look like"):
        load_engine_factory(reference)


def test_unimportable_module_raises() -> None:
    with pytest.raises(EngineLoadError, match="Cannot import engine module"):
        load_engine_factory("no_such_engine_module_xyz:create")


def test_missing_attribute_raises(fake_engine_module: types.ModuleType) -> None:
    with pytest.raises(EngineLoadError, match="has no attribute"):
        load_engine_factory("fake_engine_pkg:missing")


def test_non_callable_attribute_raises(fake_engine_module: types.ModuleType) -> None:
    with pytest.raises(EngineLoadError, match="is not callable"):
        load_engine_factory("fake_engine_pkg:NOT_CALLABLE")
