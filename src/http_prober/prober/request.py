"""Request construction for probe commands."""

from __future__ import annotations

from typing import Optional

import httpx

from http_prober.core.exceptions import RequestBuildError
from http_prober.core.logging import get_logger
from http_prober.core.models import ProbeCommand

logger = get_logger(__name__)


def target_url(protocol: str, host: str, port: str, resource: str) -> str:
    """Format the probe target as ``{protocol}://{host}:{port}{resource}``."""
    return f"{protocol}://{host}:{port}{resource}"


def parse_header_line(line: str) -> Optional[tuple[str, str]]:
    """Split a raw 'Name: Value' line, or return None if it is malformed."""
    name, sep, value = line.partition(":")
    name = name.strip()
    if not sep or not name:
        return None
    return name, value.strip()


def build_request(
    client: httpx.AsyncClient,
    command: ProbeCommand,
    url: str,
) -> httpx.Request:
    """
    Build the request for one probe attempt.

    Malformed header lines are skipped. Basic auth is applied when the
    command carries a username or a password.

    Raises:
        RequestBuildError: If httpx rejects the method or URL
    """
    headers: list[tuple[str, str]] = []
    for line in command.headers:
        parsed = parse_header_line(line)
        if parsed is None:
            logger.debug("http_probe_malformed_header", header=line)
            continue
        headers.append(parsed)

    try:
        request = client.build_request(command.method, url, headers=headers)
        if command.has_credentials:
            auth = httpx.BasicAuth(command.username, command.password)
            request = next(auth.auth_flow(request))
    except (httpx.InvalidURL, ValueError, TypeError) as e:
        raise RequestBuildError(f"Cannot build {command.method} request for {url}: {e}") from e

    return request
