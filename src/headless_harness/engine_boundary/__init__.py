"""Engine boundary domain exports."""

from .engine_contracts import (
    EmulationEngine,
    EngineStartRequest,
    EngineStartResult,
    RunState,
    RunStateSignal,
)
from .engine_loader import EngineFactory, EngineLoadError, load_engine_factory
from .engine_logging import ENGINE_LOGGER_NAME, configure_engine_logging

__all__ = [
    "EmulationEngine",
    "EngineStartRequest",
    "EngineStartResult",
    "RunState",
    "RunStateSignal",
    "EngineFactory",
    "EngineLoadError",
    "load_engine_factory",
    "ENGINE_LOGGER_NAME",
    "configure_engine_logging",
]
