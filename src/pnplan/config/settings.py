"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import yaml

if TYPE_CHECKING:
    from pnplan.optimizer.models import NutritionConstraints


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".pnplan"


@dataclass
class OptimizationConfig:
    """Optimization solver configuration."""

    time_limit_seconds: float = 10.0
    presolve: bool = True
    zero_threshold: float = 0.001  # raw solver values below this are unused
    constraint_tolerance: float = 0.1
    max_bags_tolerance: float = 0.01


@dataclass
class DefaultsConfig:
    """Default constraint values for new optimizations."""

    kcal_min: float = 1800
    kcal_max: float = 2400
    protein_min: float = 60
    protein_max: float = 90
    volume_max: float = 2500
    max_bags: Optional[int] = 5
    output_format: str = "table"  # "table", "json"

    def constraints(self) -> NutritionConstraints:
        """Build a constraint set from the defaults."""
        from pnplan.optimizer.models import NutritionConstraints

        return NutritionConstraints(
            kcal_min=self.kcal_min,
            kcal_max=self.kcal_max,
            protein_min=self.protein_min,
            protein_max=self.protein_max,
            volume_max=self.volume_max,
            max_bags=self.max_bags,
        )


@dataclass
class Settings:
    """Main application settings."""

    optimization: OptimizationConfig = field(default_factory=OptimizationConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.pnplan/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        # Parse optimization config
        if "optimization" in data:
            opt_data = data["optimization"]
            if "time_limit_seconds" in opt_data:
                settings.optimization.time_limit_seconds = float(
                    opt_data["time_limit_seconds"]
                )
            if "presolve" in opt_data:
                settings.optimization.presolve = bool(opt_data["presolve"])
            if "zero_threshold" in opt_data:
                settings.optimization.zero_threshold = float(opt_data["zero_threshold"])
            if "constraint_tolerance" in opt_data:
                settings.optimization.constraint_tolerance = float(
                    opt_data["constraint_tolerance"]
                )
            if "max_bags_tolerance" in opt_data:
                settings.optimization.max_bags_tolerance = float(
                    opt_data["max_bags_tolerance"]
                )

        # Parse defaults
        if "defaults" in data:
            def_data = data["defaults"]
            for key in ("kcal_min", "kcal_max", "protein_min", "protein_max", "volume_max"):
                if key in def_data:
                    setattr(settings.defaults, key, float(def_data[key]))
            if "max_bags" in def_data:
                max_bags = def_data["max_bags"]
                settings.defaults.max_bags = int(max_bags) if max_bags is not None else None
            if "output_format" in def_data:
                settings.defaults.output_format = def_data["output_format"]

        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.pnplan/config.yaml
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "optimization": {
                "time_limit_seconds": self.optimization.time_limit_seconds,
                "presolve": self.optimization.presolve,
                "zero_threshold": self.optimization.zero_threshold,
                "constraint_tolerance": self.optimization.constraint_tolerance,
                "max_bags_tolerance": self.optimization.max_bags_tolerance,
            },
            "defaults": {
                "kcal_min": self.defaults.kcal_min,
                "kcal_max": self.defaults.kcal_max,
                "protein_min": self.defaults.protein_min,
                "protein_max": self.defaults.protein_max,
                "volume_max": self.defaults.volume_max,
                "max_bags": self.defaults.max_bags,
                "output_format": self.defaults.output_format,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load()
    return _settings
