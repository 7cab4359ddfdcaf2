"""Configuration domain exports."""

from .loader import ConfigurationError, load_profile
from .runtime_settings import (
    CpuCore,
    ExitPolicy,
    GraphicsBackend,
    HarnessSettings,
    Profile,
    RunConfiguration,
    SystemSettings,
)

__all__ = [
    "CpuCore",
    "ExitPolicy",
    "GraphicsBackend",
    "HarnessSettings",
    "Profile",
    "RunConfiguration",
    "SystemSettings",
    "ConfigurationError",
    "load_profile",
]
