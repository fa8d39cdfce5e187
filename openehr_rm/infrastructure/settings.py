"""Application Settings and Configuration.

This module provides application-wide settings that combine configuration
from the configuration manager with application-specific defaults. The
codec configuration is loaded lazily, so importing the package never reads
the environment.
"""

from typing import Optional

from openehr_rm.domain.ports import TerminologyPort
from openehr_rm.infrastructure.config_manager import CodecConfig, ConfigManager, get_codec_config

# Application metadata
APP_NAME = "openehr-rm"
APP_VERSION = "1.0.0"


class Settings:
    """Application settings loaded from the configuration manager.

    ``reload()`` drops the cached configuration so the next access reads
    the environment again.
    """

    def __init__(self):
        """Initialize settings; configuration is loaded on first access."""
        self.app_name = APP_NAME
        self.app_version = APP_VERSION
        self._codec_config: Optional[CodecConfig] = None
        self._config_manager: Optional[ConfigManager] = None
        self._terminology: Optional[TerminologyPort] = None

    @property
    def codec_config(self) -> CodecConfig:
        """Get codec configuration.

        Returns:
            CodecConfig instance loaded from the configuration manager
        """
        if self._codec_config is None:
            self._codec_config = get_codec_config()
        return self._codec_config

    @property
    def config_manager(self) -> ConfigManager:
        """Get configuration manager instance."""
        if self._config_manager is None:
            self._config_manager = ConfigManager.from_environment()
        return self._config_manager

    @property
    def max_depth(self) -> int:
        return self.codec_config.max_depth

    @property
    def max_text_length(self) -> int:
        return self.codec_config.max_text_length

    @property
    def terminology_mode(self) -> str:
        return self.codec_config.terminology_mode

    @property
    def log_level(self) -> str:
        return self.codec_config.log_level

    def build_terminology(self) -> TerminologyPort:
        """Return the terminology port for the configured mode (cached)."""
        if self._terminology is None:
            from openehr_rm.adapters.terminology import build_terminology
            self._terminology = build_terminology(self.terminology_mode)
        return self._terminology

    def reload(self) -> None:
        """Forget cached configuration."""
        self._codec_config = None
        self._config_manager = None
        self._terminology = None


# Global settings instance
settings = Settings()
