"""Configuration Manager for Codec Limits and Terminology Mode.

This module loads the codec configuration (nesting limit, text bound,
terminology mode, log level) from the environment or a JSON file and
validates it before use.

Architecture:
    - Infrastructure layer: the domain reads limits only through settings
    - Type-safe configuration using Pydantic models
    - Fail-fast validation: a bad limit is rejected at load time, not at
      the first decode
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64
DEFAULT_MAX_TEXT_LENGTH = 10000
TERMINOLOGY_MODES = ("static", "permissive")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class CodecConfig(BaseModel):
    """Codec configuration model.

    Parameters:
        max_depth: Maximum node nesting accepted by decode, canonicalize and
            validate
        max_text_length: Upper bound on DV_TEXT values
        terminology_mode: ``static`` (built-in code tables) or ``permissive``
        log_level: Root log level applied by ``configure_logging``
    """

    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1, le=10000, description="Maximum node nesting")
    max_text_length: int = Field(default=DEFAULT_MAX_TEXT_LENGTH, ge=1, description="Maximum DV_TEXT length")
    terminology_mode: str = Field(default="static", description="Terminology port to validate against")
    log_level: str = Field(default="INFO", description="Log level")

    @field_validator("terminology_mode")
    @classmethod
    def validate_terminology_mode(cls, v: str) -> str:
        """Validate terminology mode."""
        if v.lower() not in TERMINOLOGY_MODES:
            raise ValueError(f"Unsupported terminology mode: {v}. Supported: {list(TERMINOLOGY_MODES)}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        if v.upper() not in LOG_LEVELS:
            raise ValueError(f"Unsupported log level: {v}. Supported: {list(LOG_LEVELS)}")
        return v.upper()


class ConfigManager:
    """Configuration manager for codec settings.

    Example Usage:
        ```python
        # Load from environment variables
        config = ConfigManager.from_environment()
        codec_config = config.get_codec_config()

        # Load from file
        config = ConfigManager.from_file("config.json")
        max_depth = config.get("codec.max_depth", 64)
        ```
    """

    def __init__(self, config_data: Dict[str, Any]):
        """Initialize configuration manager.

        Parameters:
            config_data: Configuration dictionary (codec settings under ``codec``)
        """
        self._config_data = config_data
        self._codec_config: Optional[CodecConfig] = None

    @classmethod
    def from_environment(cls) -> 'ConfigManager':
        """Load configuration from environment variables.

        Environment Variables:
            - RM_MAX_DEPTH: Maximum node nesting
            - RM_MAX_TEXT_LENGTH: Maximum DV_TEXT length
            - RM_TERMINOLOGY_MODE: ``static`` or ``permissive``
            - RM_LOG_LEVEL: Log level

        A ``.env`` file in the project root is loaded first when present;
        variables already set in the environment win.

        Returns:
            ConfigManager instance
        """
        env_path = Path(__file__).parent.parent.parent / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            logger.debug(f"Loaded environment variables from {env_path}")

        codec: Dict[str, Any] = {}
        if os.getenv("RM_MAX_DEPTH"):
            codec["max_depth"] = os.getenv("RM_MAX_DEPTH")
        if os.getenv("RM_MAX_TEXT_LENGTH"):
            codec["max_text_length"] = os.getenv("RM_MAX_TEXT_LENGTH")
        if os.getenv("RM_TERMINOLOGY_MODE"):
            codec["terminology_mode"] = os.getenv("RM_TERMINOLOGY_MODE")
        if os.getenv("RM_LOG_LEVEL"):
            codec["log_level"] = os.getenv("RM_LOG_LEVEL")

        return cls({"codec": codec})

    @classmethod
    def from_file(cls, config_path: str) -> 'ConfigManager':
        """Load configuration from a JSON file.

        Parameters:
            config_path: Path to configuration file

        Returns:
            ConfigManager instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        stat_info = config_file.stat()
        if stat_info.st_mode & 0o002 != 0:
            logger.warning(f"Configuration file is world-writable: {config_path}")

        try:
            with open(config_file, 'r') as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file: {str(e)}")

        if not isinstance(config_data, dict):
            raise ValueError(f"Configuration file must contain a JSON object: {config_path}")
        return cls(config_data)

    def get_codec_config(self) -> CodecConfig:
        """Get the validated codec configuration.

        Raises:
            pydantic.ValidationError: If a configured value is out of range
        """
        if self._codec_config is None:
            self._codec_config = CodecConfig(**self._config_data.get("codec", {}))
        return self._codec_config

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Parameters:
            key: Configuration key (supports dot notation, e.g., "codec.max_depth")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split(".")
        value = self._config_data

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default

        return value if value is not None else default


# ============================================================================
# Convenience Functions
# ============================================================================

def get_codec_config() -> CodecConfig:
    """Load the codec configuration from the environment.

    Returns:
        CodecConfig instance (defaults where nothing is configured)
    """
    return ConfigManager.from_environment().get_codec_config()
