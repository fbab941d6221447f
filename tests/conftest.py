"""Test configuration and fixtures for HTTP Prober."""

import io

import httpx
import pytest
from rich.console import Console

from http_prober.core.config import ProbeSettings
from http_prober.core.models import ProbeCommand, ProbeTarget
from http_prober.prober.reporter import StateReporter


@pytest.fixture
def settings() -> ProbeSettings:
    """Settings that never sleep for real."""
    return ProbeSettings(warmup_seconds=0, retry_wait=0.001, retry_count=2)


@pytest.fixture
def target() -> ProbeTarget:
    """A container publishing one app port plus the inspector's own ports."""
    return ProbeTarget(
        host_address="127.0.0.1",
        port_bindings={
            "8080/tcp": ["8080"],
            "65501/tcp": ["32768"],
            "65502/tcp": ["32769"],
        },
        cmd_port="65501/tcp",
        evt_port="65502/tcp",
        exposed_ports=["8080/tcp"],
    )


@pytest.fixture
def get_root() -> ProbeCommand:
    """GET / over both protocols."""
    return ProbeCommand(method="GET", resource="/")


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def reporter(output: io.StringIO) -> StateReporter:
    """Reporter writing plain lines into a buffer."""
    console = Console(
        file=output,
        markup=False,
        highlight=False,
        emoji=False,
        soft_wrap=True,
        width=400,
    )
    return StateReporter(True, "probe:", output=console)


@pytest.fixture
def ok_transport() -> httpx.MockTransport:
    """Transport answering 200 to everything."""
    return httpx.MockTransport(lambda request: httpx.Response(200, text="ok"))


@pytest.fixture
def refusing_transport() -> httpx.MockTransport:
    """Transport failing every call at connect time."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    return httpx.MockTransport(handler)
