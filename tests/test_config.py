"""Tests for configuration loading from environment variables and files."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from originmatch.config import (
    OriginMatchConfig,
    flatten_config,
    load_config,
    load_config_from_file,
)
from originmatch.exceptions import InvalidHostError, StrictModeMismatchError


class TestOriginMatchConfig:
    """Test OriginMatchConfig settings."""

    def test_default_values(self) -> None:
        """Test default values."""
        with patch.dict(os.environ, {}, clear=True):
            config = OriginMatchConfig()
        assert config.allowed_origins == ""
        assert config.strict is False
        assert config.log_level == "warning"
        assert config.specs() == []

    def test_env_override_allowed_origins(self) -> None:
        """Test ORIGINMATCH_ALLOWED_ORIGINS env var."""
        with patch.dict(os.environ, {"ORIGINMATCH_ALLOWED_ORIGINS": "localhost:3000,*.example.com"}):
            config = OriginMatchConfig()
            assert config.specs() == ["localhost:3000", "*.example.com"]

    def test_env_override_strict(self) -> None:
        """Test ORIGINMATCH_STRICT env var."""
        with patch.dict(os.environ, {"ORIGINMATCH_STRICT": "true"}):
            config = OriginMatchConfig()
            assert config.strict is True

    def test_list_is_joined(self) -> None:
        """Test a list of specs is accepted as well as a string."""
        config = OriginMatchConfig(allowed_origins=["localhost", "https://*.example.com"])
        assert config.allowed_origins == "localhost,https://*.example.com"

    def test_matcher_set(self) -> None:
        config = OriginMatchConfig(allowed_origins="https://*.example.com")
        origins = config.matcher_set()
        assert origins.matches("https://app.example.com") is True
        assert origins.matches("http://app.example.com") is False

    def test_empty_matcher_set(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            origins = OriginMatchConfig().matcher_set()
        assert len(origins) == 0

    def test_invalid_spec_raises(self) -> None:
        config = OriginMatchConfig(allowed_origins="a.*")
        with pytest.raises(InvalidHostError):
            config.matcher_set()

    def test_strict_rejects_ignored_parts(self) -> None:
        config = OriginMatchConfig(allowed_origins="localhost,127.0.0.1/", strict=True)
        with pytest.raises(StrictModeMismatchError):
            config.matcher_set()

    def test_lenient_accepts_ignored_parts(self) -> None:
        config = OriginMatchConfig(allowed_origins="localhost,127.0.0.1/", strict=False)
        assert config.matcher_set().matches("http://127.0.0.1") is True


class TestConfigFiles:
    """Test loading configuration files."""

    def test_load_yaml(self, tmp_path) -> None:
        path = tmp_path / "origins.yaml"
        path.write_text("allowed_origins:\n  - localhost:3000\n  - https://*.example.com\nstrict: true\n")

        config = load_config(path)
        assert config.allowed_origins == "localhost:3000,https://*.example.com"
        assert config.strict is True

    def test_load_toml(self, tmp_path) -> None:
        path = tmp_path / "origins.toml"
        path.write_text('allowed_origins = "localhost"\nlog_level = "debug"\n')

        config = load_config(path)
        assert config.allowed_origins == "localhost"
        assert config.log_level == "debug"

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config_from_file(tmp_path / "missing.yaml")

    def test_unsupported_format(self, tmp_path) -> None:
        path = tmp_path / "origins.ini"
        path.write_text("[origins]\n")
        with pytest.raises(ValueError, match="Unsupported config format"):
            load_config_from_file(path)

    def test_invalid_yaml(self, tmp_path) -> None:
        path = tmp_path / "origins.yaml"
        path.write_text("allowed_origins: [unclosed\n")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config_from_file(path)

    def test_empty_yaml(self, tmp_path) -> None:
        path = tmp_path / "origins.yaml"
        path.write_text("")
        assert load_config_from_file(path) == {}

    def test_flatten_config(self) -> None:
        assert flatten_config({"cors": {"strict": True}, "log_level": "info"}) == {
            "cors_strict": True,
            "log_level": "info",
        }
