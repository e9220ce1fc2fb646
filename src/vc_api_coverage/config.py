# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Configuration loading and validation for component API coverage."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".vc_api_coverage.yml"

# Framework-reserved instance inputs that never count as declared inputs
RESERVED_INPUT_NAMES = [
    "key",
    "ref",
    "ref_for",
    "ref_key",
    "onVnodeBeforeMount",
    "onVnodeMounted",
    "onVnodeBeforeUpdate",
    "onVnodeUpdated",
    "onVnodeBeforeUnmount",
    "onVnodeUnmounted",
    "class",
    "style",
]


class Config:
    """Configuration for component API coverage analysis.

    Loads configuration from .vc_api_coverage.yml with validation and defaults.
    """

    DEFAULTS = {
        "component_define_callees": ["defineComponent"],
        "mount_callees": ["mount", "shallowMount", "render"],
        "module_extensions": [".ts", ".tsx", ".js", ".jsx", ".vue"],
        "reserved_input_names": list(RESERVED_INPUT_NAMES),
        "max_file_size_bytes": 10 * 1024 * 1024,  # 10 MiB
        "max_resolution_depth": 32,
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration.

        Args:
            config_path: Path to configuration file. If None, uses default location.
        """
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILENAME

        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _defaults(self) -> Dict[str, Any]:
        # Lists are copied so callers cannot mutate the class defaults
        return {
            key: list(value) if isinstance(value, list) else value
            for key, value in self.DEFAULTS.items()
        }

    def _load_config(self) -> None:
        """Load and validate configuration from file."""
        if not self.config_path.exists():
            logger.info(f"Configuration file not found at {self.config_path}, using defaults")
            self._config = self._defaults()
            return

        try:
            with open(self.config_path, encoding="utf-8") as f:
                loaded_config = yaml.safe_load(f)

            if loaded_config is None:
                logger.warning("Configuration file is empty, using defaults")
                self._config = self._defaults()
                return

            if not isinstance(loaded_config, dict):
                logger.warning(
                    f"Configuration file must contain a YAML dictionary, "
                    f"got {type(loaded_config)}, using defaults"
                )
                self._config = self._defaults()
                return

            self._config = self._defaults()
            self._validate_and_merge(loaded_config)

        except yaml.YAMLError as e:
            logger.warning(
                f"Error parsing configuration file {self.config_path}: {e}, using defaults"
            )
            self._config = self._defaults()
        except OSError as e:
            logger.warning(
                f"Could not read configuration file {self.config_path}: {e}, using defaults"
            )
            self._config = self._defaults()

    def _validate_and_merge(self, loaded_config: Dict[str, Any]) -> None:
        """Validate loaded configuration and merge with defaults.

        Invalid parameters are logged as warnings and defaults are used.
        """
        for key, value in loaded_config.items():
            if key not in self.DEFAULTS:
                logger.warning(f"Unknown configuration parameter '{key}', ignoring")
                continue

            if not self._validate_parameter(key, value):
                logger.warning(
                    f"Invalid value for '{key}': {value}, using default {self.DEFAULTS[key]}"
                )
                continue

            self._config[key] = value

    def _validate_parameter(self, key: str, value: Any) -> bool:
        """Validate a configuration parameter.

        Returns:
            True if valid, False if invalid
        """
        expected_type = type(self.DEFAULTS[key])
        # bool is an int subclass; reject it for numeric settings
        if isinstance(value, bool) or not isinstance(value, expected_type):
            return False

        if key in ("max_file_size_bytes", "max_resolution_depth"):
            return bool(value > 0)
        elif key == "module_extensions":
            return all(isinstance(ext, str) and ext.startswith(".") for ext in value)
        elif key in ("component_define_callees", "mount_callees"):
            return bool(value) and all(isinstance(name, str) and name for name in value)
        elif key == "reserved_input_names":
            return all(isinstance(name, str) for name in value)

        return True

    @property
    def component_define_callees(self) -> List[str]:
        """Callees whose first argument is treated as component options."""
        value = self._config["component_define_callees"]
        assert isinstance(value, list)
        return value

    @property
    def mount_callees(self) -> List[str]:
        """Test-side calls whose second argument carries inputs and slots."""
        value = self._config["mount_callees"]
        assert isinstance(value, list)
        return value

    @property
    def module_extensions(self) -> List[str]:
        """Extension inference order for module specifiers."""
        value = self._config["module_extensions"]
        assert isinstance(value, list)
        return value

    @property
    def reserved_input_names(self) -> List[str]:
        """Framework-reserved names excluded from instance-derived inputs."""
        value = self._config["reserved_input_names"]
        assert isinstance(value, list)
        return value

    @property
    def max_file_size_bytes(self) -> int:
        """Files larger than this are treated as unreadable."""
        value = self._config["max_file_size_bytes"]
        assert isinstance(value, int)
        return value

    @property
    def max_resolution_depth(self) -> int:
        """Maximum cross-module hops followed in one resolution chain."""
        value = self._config["max_resolution_depth"]
        assert isinstance(value, int)
        return value
