"""Tests for ossclient configuration loading."""

import tempfile
from pathlib import Path

import pytest
import yaml

from ossclient.config import ClientConfig, load_config
from ossclient.transport import DEFAULT_USER_AGENT


def _write(data) -> Path:
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        yaml.dump(data, f)
        f.flush()
        return Path(f.name)


class TestLoadConfig:
    """Tests for load_config()."""

    def test_load_example_config(self):
        """Loading the example config file populates all fields."""
        config = load_config(Path(__file__).resolve().parent.parent / "ossclient.example.yaml")
        assert config.endpoint.url == "http://127.0.0.1:9000"
        assert config.endpoint.region == "us-east-1"
        assert config.endpoint.path_style is True
        assert config.auth.access_key == "ossclient"
        assert config.auth.secret_key == "ossclient-secret"
        assert config.http.timeout == 30
        assert config.observability.log_level == "INFO"
        assert config.observability.metrics is False

    def test_load_minimal_config(self):
        """Loading an empty YAML uses defaults for all fields."""
        config = load_config(_write({}))
        assert config == ClientConfig()
        assert config.http.user_agent == DEFAULT_USER_AGENT
        assert config.auth.security_token is None

    def test_nested_logging_section(self):
        """observability.logging.{level,format} map to log_level/log_format."""
        config = load_config(
            _write({"observability": {"metrics": True, "logging": {"level": "DEBUG", "format": "json"}}})
        )
        assert config.observability.log_level == "DEBUG"
        assert config.observability.log_format == "json"
        assert config.observability.metrics is True

    def test_endpoint_and_auth(self):
        """Endpoint and auth sections are read."""
        config = load_config(
            _write(
                {
                    "endpoint": {"url": "https://oss.example.com", "path_style": False},
                    "auth": {"access_key": "AK", "secret_key": "SK", "security_token": "T"},
                    "http": {"user_agent": "custom/1.0"},
                }
            )
        )
        assert config.endpoint.url == "https://oss.example.com"
        assert config.endpoint.path_style is False
        assert config.auth.security_token == "T"
        assert config.http.user_agent == "custom/1.0"

    def test_missing_file(self):
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(Path("/nonexistent/ossclient.yaml"))
