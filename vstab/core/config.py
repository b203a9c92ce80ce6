"""
Configuration management for vstab.

Provides a flexible configuration system supporting JSON files
and environment variables.
"""

import json
import os
from dataclasses import dataclass, field, asdict, fields, replace
from pathlib import Path
from typing import Any

from vstab.trajectory.smoother import SMOOTHING_METHODS


@dataclass
class StabilizerConfig:
    """
    Settings for one stabilization run.

    Example:
        config = StabilizerConfig.load("stab_config.json")
        config = config.with_overrides(get_env_config())
        config.validate()
    """
    smoothing_radius: int = 50      # In frames. Larger is steadier but reacts slower to pans
    frame_cap: int = 500            # Max motion samples collected per run
    method: str = "lk_sparse"       # Motion estimator name
    smoothing_method: str = "window"
    horizontal_border_crop: int = 70  # In pixels, cropped left and right
    border_crop_ratio: float = 0.25
    outputs: list[str] = field(default_factory=lambda: ["video"])

    @classmethod
    def load(cls, path: str | Path) -> "StabilizerConfig":
        """Load configuration from a JSON file."""
        return load_config(path)

    def save(self, path: str | Path) -> None:
        """Save configuration to a JSON file."""
        save_config(self, path)

    def to_dict(self) -> dict:
        """Convert configuration to a dictionary."""
        return asdict(self)

    def with_overrides(self, overrides: dict[str, Any]) -> "StabilizerConfig":
        """
        Return a copy with the given fields replaced.

        Keys that are not config fields and values that are None are
        ignored. String values are coerced to the field's type, so the
        output of get_env_config() can be passed directly.
        """
        known = {f.name: f for f in fields(self)}
        changes = {}
        for key, value in overrides.items():
            if key not in known or value is None:
                continue
            current = getattr(self, key)
            if isinstance(value, str) and not isinstance(current, str):
                value = _coerce(value, current)
            changes[key] = value
        return replace(self, **changes)

    def validate(self) -> None:
        """
        Check value ranges.

        Raises:
            ValueError: If any setting is out of range
        """
        if self.smoothing_radius < 0:
            raise ValueError(f"smoothing_radius must be >= 0, got {self.smoothing_radius}")
        if self.smoothing_method not in SMOOTHING_METHODS:
            raise ValueError(
                f"Unknown smoothing method: {self.smoothing_method}. "
                f"Available: {list(SMOOTHING_METHODS.keys())}"
            )
        if self.frame_cap < 1:
            raise ValueError(f"frame_cap must be >= 1, got {self.frame_cap}")
        if self.horizontal_border_crop < 0:
            raise ValueError(
                f"horizontal_border_crop must be >= 0, got {self.horizontal_border_crop}"
            )
        if not 0.0 <= self.border_crop_ratio < 1.0:
            raise ValueError(
                f"border_crop_ratio must be in [0, 1), got {self.border_crop_ratio}"
            )


def _coerce(value: str, like: Any) -> Any:
    """Convert a string to the type of ``like``."""
    if isinstance(like, bool):
        return value.strip().lower() in ('true', 'yes', '1', 'on')
    if isinstance(like, int):
        return int(value)
    if isinstance(like, float):
        return float(value)
    if isinstance(like, list):
        return [v.strip() for v in value.split(',') if v.strip()]
    return value


def load_config(path: str | Path) -> StabilizerConfig:
    """
    Load configuration from a JSON file.

    Missing keys take their default values; unknown keys are ignored.

    Args:
        path: Path to the JSON configuration file

    Returns:
        Parsed StabilizerConfig object

    Raises:
        FileNotFoundError: If the config file doesn't exist
        json.JSONDecodeError: If the JSON is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    defaults = StabilizerConfig()
    return StabilizerConfig(
        smoothing_radius=int(data.get("smoothing_radius", defaults.smoothing_radius)),
        frame_cap=int(data.get("frame_cap", defaults.frame_cap)),
        method=str(data.get("method", defaults.method)),
        smoothing_method=str(data.get("smoothing_method", defaults.smoothing_method)),
        horizontal_border_crop=int(
            data.get("horizontal_border_crop", defaults.horizontal_border_crop)
        ),
        border_crop_ratio=float(data.get("border_crop_ratio", defaults.border_crop_ratio)),
        outputs=list(data.get("outputs", defaults.outputs)),
    )


def save_config(config: StabilizerConfig, path: str | Path) -> None:
    """
    Save configuration to a JSON file.

    Args:
        config: Configuration object to save
        path: Output path for the JSON file
    """
    path = Path(path)
    with open(path, "w") as f:
        json.dump(config.to_dict(), f, indent=2)


def create_example_config(path: str | Path = "stab_config.json") -> StabilizerConfig:
    """
    Create an example configuration file.

    Args:
        path: Output path for the example config

    Returns:
        The created StabilizerConfig object
    """
    config = StabilizerConfig(
        smoothing_radius=50,
        frame_cap=500,
        method="lk_sparse",
        outputs=["video", "compare", "frames=dir=images"],
    )
    config.save(path)
    return config


def get_env_config(prefix: str = "VSTAB_") -> dict[str, Any]:
    """
    Get configuration from environment variables.

    All environment variables starting with the prefix will be included.
    Variable names are converted to lowercase with the prefix removed.

    Example:
        VSTAB_SMOOTHING_RADIUS=30 -> {"smoothing_radius": "30"}
    """
    config = {}
    for key, value in os.environ.items():
        if key.startswith(prefix):
            config_key = key[len(prefix):].lower()
            config[config_key] = value
    return config
