"""Tests for the configuration manager and settings."""

import json
import logging
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from openehr_rm.adapters.terminology import PermissiveTerminology, StaticTerminology
from openehr_rm.infrastructure.config_manager import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_TEXT_LENGTH,
    CodecConfig,
    ConfigManager,
)
from openehr_rm.infrastructure.logging_config import LOG_FORMAT, configure_logging
from openehr_rm.infrastructure.settings import settings


class TestCodecConfig:
    """Test suite for CodecConfig validation."""

    def test_defaults(self):
        """Test default limits and modes."""
        config = CodecConfig()
        assert config.max_depth == DEFAULT_MAX_DEPTH == 64
        assert config.max_text_length == DEFAULT_MAX_TEXT_LENGTH
        assert config.terminology_mode == "static"
        assert config.log_level == "INFO"

    def test_normalizes_case(self):
        """Test that modes and log levels are case-insensitive."""
        config = CodecConfig(terminology_mode="PERMISSIVE", log_level="debug")
        assert config.terminology_mode == "permissive"
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize("fields", [
        {"max_depth": 0},
        {"max_depth": 10001},
        {"max_text_length": 0},
        {"terminology_mode": "snomed"},
        {"log_level": "VERBOSE"},
    ])
    def test_rejects_invalid_values(self, fields):
        """Test that out-of-range or unknown values fail at load time."""
        with pytest.raises(ValidationError):
            CodecConfig(**fields)


class TestConfigManager:
    """Test suite for ConfigManager."""

    def test_from_environment(self):
        """Test loading codec settings from RM_* variables."""
        env = {"RM_MAX_DEPTH": "12", "RM_TERMINOLOGY_MODE": "permissive", "RM_LOG_LEVEL": "warning"}
        with patch.dict("os.environ", env):
            config = ConfigManager.from_environment().get_codec_config()
        assert config.max_depth == 12
        assert config.terminology_mode == "permissive"
        assert config.log_level == "WARNING"

    def test_from_environment_invalid(self):
        """Test that a non-numeric depth is rejected."""
        with patch.dict("os.environ", {"RM_MAX_DEPTH": "deep"}):
            manager = ConfigManager.from_environment()
        with pytest.raises(ValidationError):
            manager.get_codec_config()

    def test_from_file(self, tmp_path):
        """Test loading from a JSON file and dot-notation lookup."""
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"codec": {"max_depth": 32, "max_text_length": 500}}))

        manager = ConfigManager.from_file(str(config_file))
        assert manager.get("codec.max_depth") == 32
        assert manager.get("codec.missing", "fallback") == "fallback"
        assert manager.get("codec.max_depth.nested", "fallback") == "fallback"
        assert manager.get_codec_config().max_text_length == 500

    def test_from_file_missing(self, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            ConfigManager.from_file(str(tmp_path / "absent.json"))

    def test_from_file_invalid_json(self, tmp_path):
        """Test that malformed JSON raises ValueError."""
        config_file = tmp_path / "config.json"
        config_file.write_text("{not json")
        with pytest.raises(ValueError, match="Invalid JSON"):
            ConfigManager.from_file(str(config_file))

    def test_from_file_not_an_object(self, tmp_path):
        """Test that a top-level array is rejected."""
        config_file = tmp_path / "config.json"
        config_file.write_text("[1, 2]")
        with pytest.raises(ValueError, match="JSON object"):
            ConfigManager.from_file(str(config_file))


class TestSettings:
    """Test suite for the global settings object."""

    def test_reload_reads_environment_again(self):
        """Test that reload drops the cached configuration."""
        with patch.dict("os.environ", {"RM_MAX_DEPTH": "9"}):
            settings.reload()
            assert settings.max_depth == 9
        with patch.dict("os.environ", {"RM_MAX_DEPTH": "10"}):
            assert settings.max_depth == 9
            settings.reload()
            assert settings.max_depth == 10

    def test_build_terminology_follows_mode(self):
        """Test that the terminology port matches the configured mode."""
        assert isinstance(settings.build_terminology(), StaticTerminology)
        with patch.dict("os.environ", {"RM_TERMINOLOGY_MODE": "permissive"}):
            settings.reload()
            assert isinstance(settings.build_terminology(), PermissiveTerminology)

    def test_text_length_limit(self):
        """Test the text length setting."""
        with patch.dict("os.environ", {"RM_MAX_TEXT_LENGTH": "20"}):
            settings.reload()
            assert settings.max_text_length == 20


class TestConfigureLogging:
    """Test suite for configure_logging."""

    def test_explicit_level(self):
        """Test that an explicit level is applied with the shared format."""
        with patch("logging.basicConfig") as basic_config:
            configure_logging("debug")
        basic_config.assert_called_once_with(level=logging.DEBUG, format=LOG_FORMAT)

    def test_level_from_settings(self):
        """Test that the configured RM_LOG_LEVEL is used by default."""
        with patch.dict("os.environ", {"RM_LOG_LEVEL": "error"}), patch("logging.basicConfig") as basic_config:
            settings.reload()
            configure_logging()
        basic_config.assert_called_once_with(level=logging.ERROR, format=LOG_FORMAT)
