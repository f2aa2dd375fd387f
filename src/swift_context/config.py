# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Configuration loading and validation for swift-context."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from swift_context.errors import SwiftContextError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".swift_context.yml"


class ConfigurationError(SwiftContextError):
    """Raised when an explicit configuration override is invalid."""

    pass


class Config:
    """Configuration for dependency analysis and context generation.

    Loads configuration from .swift_context.yml with validation and defaults.
    Invalid or unknown keys in the file are logged and ignored; explicit
    overrides passed through override() raise ConfigurationError instead.
    """

    DEFAULTS: Dict[str, Any] = {
        "sources_dir": "Sources",
        "source_extension": ".swift",
        "system_modules": ["Swift", "Foundation", "UIKit", "SwiftUI", "Combine"],
        "max_tokens": 8192,
        "token_encoding": "cl100k_base",
        "strict_syntax": True,
        "strict_imports": False,
        "fail_on_token_limit": False,
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration.

        Args:
            config_path: Path to configuration file. If None, uses
                .swift_context.yml in the current directory.
        """
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILENAME

        self.config_path = config_path
        self._config: Dict[str, Any] = {}
        self._load_config()

    @classmethod
    def for_project(cls, project_root: Path) -> "Config":
        """Load the configuration file that lives in a project root."""
        return cls(config_path=Path(project_root) / CONFIG_FILENAME)

    def _load_config(self) -> None:
        """Load and validate configuration from file."""
        if not self.config_path.exists():
            logger.debug(f"Configuration file not found at {self.config_path}, using defaults")
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

    def _defaults(self) -> Dict[str, Any]:
        return {
            key: list(value) if isinstance(value, list) else value
            for key, value in self.DEFAULTS.items()
        }

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
        # bool is a subclass of int; keep the two apart
        if expected_type is int and isinstance(value, bool):
            return False
        if not isinstance(value, expected_type):
            return False

        if key == "max_tokens":
            return bool(value > 0)
        elif key == "sources_dir":
            return bool(value) and "/" not in value and "\\" not in value
        elif key == "source_extension":
            return len(value) > 1 and value.startswith(".")
        elif key == "token_encoding":
            return bool(value.strip())
        elif key == "system_modules":
            return all(isinstance(item, str) for item in value)

        return True

    def override(self, key: str, value: Any) -> None:
        """Set a value explicitly (e.g. from a CLI flag).

        Raises:
            ConfigurationError: If the key is unknown or the value is invalid.
        """
        if key not in self.DEFAULTS:
            raise ConfigurationError(f"Unknown configuration parameter '{key}'")
        if not self._validate_parameter(key, value):
            raise ConfigurationError(f"Invalid value for '{key}': {value}")
        self._config[key] = value

    @property
    def sources_dir(self) -> str:
        """Name of the directory holding module directories (SwiftPM convention)."""
        value = self._config["sources_dir"]
        assert isinstance(value, str)
        return value

    @property
    def source_extension(self) -> str:
        """Extension of source files considered during resolution."""
        value = self._config["source_extension"]
        assert isinstance(value, str)
        return value

    @property
    def system_modules(self) -> List[str]:
        """Imports that never resolve to project files."""
        value = self._config["system_modules"]
        assert isinstance(value, list)
        return value

    @property
    def max_tokens(self) -> int:
        """Token budget for the generated bundle."""
        value = self._config["max_tokens"]
        assert isinstance(value, int)
        return value

    @property
    def token_encoding(self) -> str:
        """tiktoken encoding used to count tokens."""
        value = self._config["token_encoding"]
        assert isinstance(value, str)
        return value

    @property
    def strict_syntax(self) -> bool:
        """Whether a parse tree containing error nodes aborts analysis."""
        value = self._config["strict_syntax"]
        assert isinstance(value, bool)
        return value

    @property
    def strict_imports(self) -> bool:
        """Whether an unresolved non-system import raises DependencyNotFoundError."""
        value = self._config["strict_imports"]
        assert isinstance(value, bool)
        return value

    @property
    def fail_on_token_limit(self) -> bool:
        """Whether an over-budget bundle raises instead of being truncated."""
        value = self._config["fail_on_token_limit"]
        assert isinstance(value, bool)
        return value
