"""Configuration loading for the performance engine.

``ConfigLoader`` reads YAML files and offers dot-notation access.
``PerformanceSettings`` holds the engine's tunables (output rounding, the
standard altimeter setting) and is built from the ``performance`` section
of ``config/settings.yaml``.

Typical usage example:
    from pohperf.core.config import load_settings

    settings = load_settings()
    service = PerformanceQueryService(dataset, settings)
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from pohperf.core.logging_system import get_logger
from pohperf.core.resource_path import get_config_path

logger = get_logger(__name__)


class ConfigError(Exception):
    """Raised when configuration operations fail."""


class ConfigLoader:
    """Configuration loader for YAML files.

    Examples:
        >>> config = ConfigLoader.load("config/settings.yaml")
        >>> increment = config.get("performance.distance_rounding_ft", default=50)
    """

    def __init__(self, data: dict[str, Any]) -> None:
        self._data = data

    @classmethod
    def load(cls, path: str | Path) -> "ConfigLoader":
        """Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file.

        Returns:
            ConfigLoader instance with loaded data.

        Raises:
            ConfigError: If the file is missing, unreadable or not a mapping.
        """
        path = Path(path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load configuration: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration root must be a mapping: {path}")

        logger.info("Loaded configuration from: %s", path)
        return cls(data)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value using dot notation.

        Args:
            key: Configuration key, e.g. "performance.distance_rounding_ft".
            default: Default value if key not found.

        Returns:
            Configuration value or default.
        """
        value: Any = self._data

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_section(self, key: str) -> dict[str, Any]:
        """Get an entire configuration section.

        Raises:
            ConfigError: If section not found or not a dict.
        """
        value = self.get(key)

        if value is None:
            raise ConfigError(f"Configuration section not found: {key}")

        if not isinstance(value, dict):
            raise ConfigError(f"Configuration key is not a section: {key}")

        return value

    def merge(self, other: "ConfigLoader") -> None:
        """Merge another configuration into this one; other's values win."""
        self._data = self._merge_dicts(self._data, other._data)

    def _merge_dicts(self, base: dict, override: dict) -> dict:
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_dicts(result[key], value)
            else:
                result[key] = value

        return result

    def to_dict(self) -> dict[str, Any]:
        return self._data.copy()


@dataclass(frozen=True)
class PerformanceSettings:
    """Engine tunables.

    Attributes:
        distance_rounding_ft: Rounding step for takeoff/landing distances
        standard_altimeter_inhg: Altimeter setting that yields PA = elevation
    """

    distance_rounding_ft: float = 50.0
    standard_altimeter_inhg: float = 29.92

    def __post_init__(self) -> None:
        # Distances are reported as whole feet
        if not float(self.distance_rounding_ft).is_integer():
            raise ConfigError(
                "performance.distance_rounding_ft must be a whole number of feet, "
                f"got {self.distance_rounding_ft!r}"
            )

    @classmethod
    def from_config(cls, config: ConfigLoader) -> "PerformanceSettings":
        """Build settings from the ``performance`` section of a config.

        Raises:
            ConfigError: If a value is not a positive number.
        """
        defaults = cls()
        values = {
            "distance_rounding_ft": config.get(
                "performance.distance_rounding_ft", defaults.distance_rounding_ft
            ),
            "standard_altimeter_inhg": config.get(
                "performance.standard_altimeter_inhg", defaults.standard_altimeter_inhg
            ),
        }

        for key, value in values.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ConfigError(f"performance.{key} must be a positive number, got {value!r}")

        return cls(**{key: float(value) for key, value in values.items()})


def load_settings(path: str | Path | None = None) -> PerformanceSettings:
    """Load engine settings.

    Args:
        path: Settings YAML file. If None, config/settings.yaml is used when
            present, otherwise the defaults.

    Returns:
        PerformanceSettings instance.

    Raises:
        ConfigError: If an explicitly given file is missing or invalid.
    """
    if path is None:
        path = get_config_path("settings.yaml")
        if not path.exists():
            logger.debug("No settings file at %s, using defaults", path)
            return PerformanceSettings()

    return PerformanceSettings.from_config(ConfigLoader.load(path))
