"""
Unit tests for ServerConfig.
"""

import logging

import pytest

from diceroller.config import ServerConfig


class TestFromEnv:
    """Tests for ServerConfig.from_env."""

    def test_defaults(self):
        """Test an empty environment gives 0.0.0.0:3000 at INFO."""
        config = ServerConfig.from_env({})

        assert config.host == "0.0.0.0"
        assert config.port == 3000
        assert config.log_level == "INFO"

    def test_port_from_env(self):
        """Test PORT is read as an integer."""
        assert ServerConfig.from_env({"PORT": "8080"}).port == 8080

    def test_blank_port_uses_default(self):
        """Test an empty PORT falls back to 3000."""
        assert ServerConfig.from_env({"PORT": "  "}).port == 3000

    def test_invalid_port(self):
        """Test a non-numeric PORT raises ValueError."""
        with pytest.raises(ValueError, match="PORT"):
            ServerConfig.from_env({"PORT": "http"})

    def test_host_and_log_level(self):
        """Test HOST and LOG_LEVEL, with the level upper-cased."""
        config = ServerConfig.from_env({"HOST": "127.0.0.1", "LOG_LEVEL": "debug"})

        assert config.host == "127.0.0.1"
        assert config.log_level == "DEBUG"
        assert config.log_level_value == logging.DEBUG

    def test_reads_os_environ(self, monkeypatch):
        """Test os.environ is the default source."""
        monkeypatch.setenv("PORT", "4321")

        assert ServerConfig.from_env().port == 4321


class TestValidate:
    """Tests for ServerConfig.validate."""

    def test_defaults_are_valid(self):
        """Test the default config validates."""
        ServerConfig().validate()

    def test_port_zero_allowed(self):
        """Test port 0 (OS-assigned) is accepted."""
        ServerConfig(port=0).validate()

    @pytest.mark.parametrize("kwargs", [
        {"port": -1},
        {"port": 65536},
        {"min_workers": 0},
        {"min_workers": 8, "max_workers": 4},
        {"queue_size": 0},
        {"buffer_size": 512},
        {"timeout": 0},
        {"log_level": "LOUD"},
    ])
    def test_invalid_values(self, kwargs):
        """Test each bad value raises ValueError."""
        with pytest.raises(ValueError):
            ServerConfig(**kwargs).validate()
