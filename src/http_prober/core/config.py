"""Configuration management using Pydantic Settings."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from http_prober.core.exceptions import ConfigurationError
from http_prober.core.models import ProbeCommand


class ProbeSettings(BaseSettings):
    """HTTP probe configuration."""

    model_config = SettingsConfigDict(
        env_prefix="HTTP_PROBER_",
        case_sensitive=False,
    )

    retry_count: int = Field(
        default=0,
        ge=0,
        le=100,
        description="Attempts per port/command/protocol (0 uses the default of 5)"
    )

    retry_wait: float = Field(
        default=0,
        ge=0,
        le=600,
        description="Base backoff unit in seconds (0 uses the built-in waits)"
    )

    target_ports: list[int] = Field(
        default_factory=list,
        description="Only probe these host ports, in this order"
    )

    warmup_seconds: float = Field(
        default=9.0,
        ge=0,
        le=600,
        description="Delay before the first call while the target starts up"
    )

    timeout: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Overall HTTP client timeout in seconds"
    )

    max_idle_connections: int = Field(
        default=10,
        ge=0,
        le=100,
        description="Maximum idle keep-alive connections kept in the pool"
    )

    idle_timeout: float = Field(
        default=30.0,
        ge=0,
        le=600,
        description="Seconds an idle connection is kept before closing"
    )

    print_state: bool = Field(
        default=False,
        description="Print state, call and summary lines to stdout"
    )

    print_prefix: str = Field(
        default="http-prober:",
        description="Prefix for printed state lines"
    )

    @classmethod
    def from_yaml(cls, path: Path) -> "ProbeSettings":
        """Load settings from a YAML configuration file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    @classmethod
    def from_file_or_default(cls, path: Path | None = None) -> "ProbeSettings":
        """Load from file if exists, otherwise return defaults."""
        default_paths = [
            Path("http-prober.yaml"),
            Path("http-prober.yml"),
            Path(".http-prober.yaml"),
            Path.home() / ".config" / "http-prober" / "config.yaml",
        ]

        if path and path.exists():
            return cls.from_yaml(path)

        for default_path in default_paths:
            if default_path.exists():
                return cls.from_yaml(default_path)

        return cls()


def load_commands(path: Path) -> list[ProbeCommand]:
    """Load probe commands from a JSON or YAML file.

    Accepts either ``{"commands": [...]}`` or a bare list of command objects.

    Raises:
        ConfigurationError: If the file is missing, unparsable, or has invalid commands
    """
    if not path.exists():
        raise ConfigurationError(f"Command file '{path}' does not exist")

    text = path.read_text()
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to parse command file '{path}': {e}") from e

    if isinstance(data, dict):
        data = data.get("commands", [])
    if data is None:
        return []
    if not isinstance(data, list):
        raise ConfigurationError(f"Command file '{path}' must hold a list of commands")

    commands = []
    for idx, item in enumerate(data):
        if not isinstance(item, dict):
            raise ConfigurationError(f"Command #{idx + 1} in '{path}' is not a mapping")
        try:
            commands.append(ProbeCommand(**item))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid command #{idx + 1} in '{path}': {e}") from e

    return commands
