"""Configuration loading and Pydantic models for ossclient."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from ossclient.transport import DEFAULT_USER_AGENT


class EndpointConfig(BaseModel):
    """Service endpoint and addressing configuration."""

    url: str = "http://127.0.0.1:9000"
    region: str = "us-east-1"
    path_style: bool = True


class AuthConfig(BaseModel):
    """Credential configuration."""

    access_key: str = ""
    secret_key: str = ""
    security_token: str | None = None


class HttpConfig(BaseModel):
    """Transport configuration."""

    timeout: float = 60.0
    user_agent: str = DEFAULT_USER_AGENT


class ObservabilityConfig(BaseModel):
    """Logging and metrics configuration."""

    log_level: str = "INFO"
    log_format: str = "text"
    metrics: bool = False


class ClientConfig(BaseModel):
    """Top-level ossclient configuration."""

    endpoint: EndpointConfig = Field(default_factory=EndpointConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


def _parse_endpoint(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the endpoint section from YAML data into a dict for Pydantic."""
    if data is None:
        return {}
    return {
        "url": data.get("url", "http://127.0.0.1:9000"),
        "region": data.get("region", "us-east-1"),
        "path_style": data.get("path_style", True),
    }


def _parse_auth(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the auth section from YAML data."""
    if data is None:
        return {}
    return {
        "access_key": data.get("access_key", ""),
        "secret_key": data.get("secret_key", ""),
        "security_token": data.get("security_token"),
    }


def _parse_http(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the http section from YAML data."""
    if data is None:
        return {}
    result: dict[str, Any] = {"timeout": data.get("timeout", 60.0)}
    if data.get("user_agent"):
        result["user_agent"] = data["user_agent"]
    return result


def _parse_observability(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the observability section from YAML data.

    Handles nested structure: observability.logging.level -> log_level, etc.
    """
    if data is None:
        return {}
    result: dict[str, Any] = {"metrics": data.get("metrics", False)}
    logging_section = data.get("logging")
    if isinstance(logging_section, dict):
        result["log_level"] = logging_section.get("level", "INFO")
        result["log_format"] = logging_section.get("format", "text")
    return result


def load_config(path: Path) -> ClientConfig:
    """Load a ClientConfig from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        A fully populated ClientConfig validated by Pydantic.

    Raises:
        FileNotFoundError: If the config file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
    """
    with open(path, "r") as fh:
        raw: dict[str, Any] = yaml.safe_load(fh) or {}

    return ClientConfig(
        endpoint=EndpointConfig(**_parse_endpoint(raw.get("endpoint"))),
        auth=AuthConfig(**_parse_auth(raw.get("auth"))),
        http=HttpConfig(**_parse_http(raw.get("http"))),
        observability=ObservabilityConfig(**_parse_observability(raw.get("observability"))),
    )
