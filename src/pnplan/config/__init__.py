"""Configuration for pnplan."""

from pnplan.config.settings import (
    DefaultsConfig,
    OptimizationConfig,
    Settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "DefaultsConfig",
    "OptimizationConfig",
    "Settings",
    "get_settings",
    "reload_settings",
]
