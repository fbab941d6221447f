"""Data models for HTTP Prober."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from http_prober.core.exceptions import ConfigurationError

PLAIN_PROTOCOL = "http"
SECURE_PROTOCOL = "https"
SUPPORTED_PROTOCOLS = (PLAIN_PROTOCOL, SECURE_PROTOCOL)


class ErrorKind(str, Enum):
    """Classification bucket for a failed probe attempt."""

    NOT_READY = "not-ready"
    TRANSPORT_ERROR = "web-error"
    OTHER = "other"


class ProbeCommand(BaseModel):
    """A configured HTTP request template issued against every resolved port."""

    model_config = ConfigDict(frozen=True)

    method: str = Field(default="GET", description="HTTP method")
    resource: str = Field(default="/", description="Resource path, including the leading slash")
    protocol: str = Field(
        default="",
        description="http or https; empty means try both, plaintext first",
    )
    headers: tuple[str, ...] = Field(
        default=(),
        description="Raw 'Name: Value' header lines",
    )
    username: str = ""
    password: str = ""
    port: Optional[int] = Field(
        default=None,
        description="Accepted for command file compatibility; ports come from resolution",
    )

    @field_validator("method")
    @classmethod
    def normalize_method(cls, value: str) -> str:
        value = value.strip().upper()
        return value or "GET"

    @field_validator("protocol")
    @classmethod
    def normalize_protocol(cls, value: str) -> str:
        value = (value or "").strip().lower()
        if value and value not in SUPPORTED_PROTOCOLS:
            raise ValueError(f"unsupported protocol '{value}' (expected http or https)")
        return value

    @field_validator("resource")
    @classmethod
    def normalize_resource(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith("/"):
            value = "/" + value
        return value

    def protocols(self) -> tuple[str, ...]:
        """Protocols to try for this command, in order."""
        if self.protocol:
            return (self.protocol,)
        return SUPPORTED_PROTOCOLS

    @property
    def has_credentials(self) -> bool:
        return bool(self.username or self.password)

    @classmethod
    def parse(cls, text: str) -> "ProbeCommand":
        """Parse the short form ``[protocol:]method:resource``.

        A bare resource (``/health``) is a GET over both protocols.

        Raises:
            ConfigurationError: If the text has no resource path or too many parts
        """
        text = text.strip()
        idx = text.find("/")
        if idx < 0:
            raise ConfigurationError(f"Invalid probe command '{text}': missing resource path")

        resource = text[idx:]
        head = text[:idx]
        if head and not head.endswith(":"):
            raise ConfigurationError(f"Invalid probe command '{text}': expected ':' before resource")

        parts = head.rstrip(":").split(":") if head else []
        try:
            if len(parts) == 0:
                return cls(resource=resource)
            if len(parts) == 1:
                return cls(method=parts[0], resource=resource)
            if len(parts) == 2:
                return cls(protocol=parts[0], method=parts[1], resource=resource)
        except ValueError as e:
            raise ConfigurationError(f"Invalid probe command '{text}': {e}") from e

        raise ConfigurationError(
            f"Invalid probe command '{text}': expected [protocol:]method:resource"
        )


DEFAULT_COMMAND = ProbeCommand()


class ProbeTarget(BaseModel):
    """What the container inspector knows about the service under test."""

    host_address: str = Field(default="127.0.0.1", description="Address the ports are reachable on")
    port_bindings: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Container port key (e.g. '8080/tcp') to host-facing ports",
    )
    cmd_port: Optional[str] = Field(default=None, description="Inspector command port key")
    evt_port: Optional[str] = Field(default=None, description="Inspector event port key")
    exposed_ports: list[str] = Field(
        default_factory=list,
        description="Ports declared by the image build metadata, in declaration order",
    )

    def available_ports(self) -> set[str]:
        """Host-facing ports that can be probed.

        Only the first host port of each binding is used, and the
        inspector's own command and event ports are never included.
        """
        available: set[str] = set()
        for key, host_ports in self.port_bindings.items():
            if key in (self.cmd_port, self.evt_port):
                continue
            if host_ports:
                available.add(str(host_ports[0]))
        return available


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProbeCall(BaseModel):
    """Outcome of a single probe attempt."""

    port: str
    protocol: str
    method: str
    url: str
    attempt: int = Field(..., ge=1)
    status_code: int = 0
    error: str = "none"
    error_kind: Optional[ErrorKind] = None
    timestamp: datetime = Field(default_factory=_utc_now)

    @property
    def success(self) -> bool:
        return self.error_kind is None


class ProbeSummary(BaseModel):
    """Counters for a finished (or running) probe."""

    total: int = 0
    failures: int = 0
    successful: int = 0

    @property
    def warning(self) -> Optional[str]:
        if self.total == 0:
            return "no.calls"
        if self.successful == 0:
            return "no.successful.calls"
        return None
