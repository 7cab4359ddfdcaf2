"""Resolution of engine factories from `module:attribute` references."""

from __future__ import annotations

import importlib
from collections.abc import Callable

from .engine_contracts import EmulationEngine

EngineFactory = Callable[[], EmulationEngine]


class EngineLoadError(Exception):
    """Raised when an engine factory reference cannot be resolved."""


def load_engine_factory(reference: str) -> EngineFactory:
    """Import and return the engine factory named by `package.module:attribute`."""
    module_name, separator, attribute_path = reference.strip().partition(":")
    if not separator or not module_name or not attribute_path:
        raise EngineLoadError(
            f"Engine reference must look like 'package.module:factory', got: {reference!r}"
        )
    try:
        target: object = importlib.import_module(module_name)
    except ImportError as exc:
        raise EngineLoadError(f"Cannot import engine module {module_name!r}: {exc}") from exc
    for attribute in attribute_path.split("."):
        try:
            target = getattr(target, attribute)
        except AttributeError as exc:
            raise EngineLoadError(
                f"Engine module {module_name!r} has no attribute {attribute_path!r}"
            ) from exc
    if not callable(target):
        raise EngineLoadError(f"Engine factory {reference!r} is not callable")
    return target  # type: ignore[return-value]
