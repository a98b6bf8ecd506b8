"""
================================================================================
Configuration Loader
================================================================================

YAML-based configuration management with environment variable override support.

Features:
    - YAML configuration loading (testsuites/config/config.yaml)
    - Environment variable override (BROWSER_HEADLESS overrides browser.headless)
    - Runtime overrides for tests and CLI flags
    - Dot notation path access with typed helpers
    - Stable fingerprints over selected keys (capability cache keys)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import hashlib
import json
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml
from loguru import logger


# Default configuration file path
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "config.yaml"

_TRUTHY = ("true", "1", "yes", "on")


class ConfigurationError(Exception):
    """Raised when configuration loading or access fails."""
    pass


class ConfigLoader:
    """
    Configuration loader with YAML and environment variable support.

    Configuration hierarchy (highest to lowest priority):
        1. Runtime overrides (constructor ``overrides`` or ``set()``)
        2. Environment variables (BROWSER_HEADLESS)
        3. YAML configuration file
        4. Default values

    Usage:
        >>> config = ConfigLoader()
        >>> config.get("grid.url", "http://localhost:4444/wd/hub")
        'http://selenium-hub:4444/wd/hub'  # From YAML or env var

        >>> config.get_bool("browser.headless")
        True

    Environment Variable Mapping:
        - browser.headless -> BROWSER_HEADLESS
        - browser.window_size -> BROWSER_WINDOW_SIZE
        - grid.url -> GRID_URL
        - cloud.provider -> CLOUD_PROVIDER
    """

    _instance: Optional["ConfigLoader"] = None

    def __init__(
        self,
        config_path: Optional[Path] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize configuration loader.

        Args:
            config_path: Path to YAML configuration file.
                        Uses DEFAULT_CONFIG_PATH if not specified.
            overrides: Dot-notation keys that take precedence over
                       everything else (useful in tests).
        """
        self._config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._config: Dict[str, Any] = {}
        self._overrides: Dict[str, Any] = dict(overrides or {})
        self._load_config()

    @classmethod
    def instance(cls) -> "ConfigLoader":
        """
        Get the shared process-wide configuration.

        Components accept an explicit ConfigLoader; this is only the
        default used when none is passed.
        """
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self._config_path.exists():
            logger.warning(
                f"Configuration file not found: {self._config_path}. "
                f"Using defaults and environment variables only."
            )
            self._config = {}
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
            logger.debug(f"Loaded configuration from: {self._config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}"
            ) from e

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        Checks runtime overrides, then environment variables, then YAML
        config, then falls back to the default.

        Args:
            key: Dot-notation path (e.g., "grid.url")
            default: Default value if key not found

        Returns:
            Configuration value or default

        Examples:
            >>> config.get("browser.window_size", "1920,1080")
            '1920,1080'

            >>> config.get("timeouts.page_load", 30)
            30
        """
        if key in self._overrides:
            return self._overrides[key]

        # Check environment variable first
        env_key = key.upper().replace(".", "_")
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return self._convert_type(env_value, default)

        # Navigate YAML config by dot notation
        value = self._config
        for part in key.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = None

            if value is None:
                return default

        return value

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Get a value coerced to bool ("true", "1", "yes", "on" are truthy)."""
        value = self.get(key, default)
        if isinstance(value, str):
            return value.strip().lower() in _TRUTHY
        return bool(value)

    def get_list(self, key: str, default: Optional[List[str]] = None) -> List[str]:
        """
        Get a list value.

        Accepts either a YAML list or a comma-separated string, which is
        what environment variables provide.
        """
        value = self.get(key, default)
        if value is None:
            return []
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return [str(item).strip() for item in value]

    def set(self, key: str, value: Any) -> None:
        """Set a runtime override for a dot-notation key."""
        self._overrides[key] = value

    def fingerprint(self, keys: Iterable[str]) -> str:
        """
        Stable short hash over the resolved values of ``keys``.

        Two loaders that resolve the same values for these keys share a
        fingerprint regardless of where the values came from.
        """
        resolved = {key: self.get(key) for key in sorted(set(keys))}
        payload = json.dumps(resolved, sort_keys=True, default=str)
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:16]

    def reload(self) -> None:
        """
        Reload configuration from file.

        Useful when configuration file has been updated during runtime.
        Runtime overrides are kept.
        """
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    def _convert_type(self, value: str, reference: Any) -> Any:
        """
        Convert string value to match reference type.

        Used for environment variables which are always strings.
        """
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.lower() in _TRUTHY
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                return value
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                return value

        return value

    @classmethod
    def reset(cls) -> None:
        """
        Reset the shared instance.

        Useful for testing when configuration needs to be reloaded
        with different settings.
        """
        cls._instance = None


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "DEFAULT_CONFIG_PATH",
]
