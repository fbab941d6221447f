"""Background HTTP probe engine with classified retries."""

from __future__ import annotations

import asyncio
from typing import Optional, Sequence

import httpx

from http_prober.core.config import ProbeSettings
from http_prober.core.exceptions import ProbeError, ProbeStateError
from http_prober.core.logging import get_logger
from http_prober.core.models import (
    ProbeCall,
    ProbeCommand,
    ProbeSummary,
    ProbeTarget,
)
from http_prober.prober.ports import resolve_ports
from http_prober.prober.reporter import StateReporter
from http_prober.prober.request import build_request, target_url
from http_prober.prober.retry import BackoffPolicy, classify_error, max_retry_count

logger = get_logger(__name__)


class ProbeEngine:
    """
    Exercises a freshly started service over HTTP.

    Every (port, command, protocol) combination is tried in order, one call
    at a time, retrying failed calls with a backoff that depends on why the
    call failed. The run happens in a single background task started by
    ``start()``; ``wait()`` returns once every combination was processed.

    Ports are resolved once, here in the constructor, and never change.
    Counters are only touched by the background task.
    """

    def __init__(
        self,
        target: ProbeTarget,
        commands: Sequence[ProbeCommand],
        settings: Optional[ProbeSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        reporter: Optional[StateReporter] = None,
    ):
        self.target = target
        self.commands = tuple(commands)
        self.settings = settings or ProbeSettings()
        self.transport = transport
        self.reporter = reporter or StateReporter(
            self.settings.print_state,
            self.settings.print_prefix,
        )

        self.ports: tuple[str, ...] = tuple(resolve_ports(
            target.available_ports(),
            target_ports=self.settings.target_ports,
            exposed_ports=target.exposed_ports,
        ))
        self.max_retry_count = max_retry_count(self.settings.retry_count)
        self.backoff = BackoffPolicy.from_retry_wait(self.settings.retry_wait)

        self.call_count = 0
        self.error_count = 0
        self.ok_count = 0
        self.calls: list[ProbeCall] = []

        self._task: Optional[asyncio.Task] = None
        self._done = asyncio.Event()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def start(self) -> asyncio.Task:
        """Spawn the probe run and return immediately.

        Must be called from a running event loop.

        Raises:
            ProbeStateError: If the engine was already started
        """
        if self._task is not None:
            raise ProbeStateError("HTTP probe already started")

        self._task = asyncio.get_running_loop().create_task(self._run())
        return self._task

    async def wait(self) -> ProbeSummary:
        """Block until the run finished, then return its summary.

        Raises:
            ProbeError: If the run itself broke down (not a failed call)
        """
        await self._done.wait()
        if self._task is not None:
            try:
                await self._task
            except Exception as e:
                raise ProbeError(f"HTTP probe run failed: {e}") from e
        return self.summary()

    def summary(self) -> ProbeSummary:
        return ProbeSummary(
            total=self.call_count,
            failures=self.error_count,
            successful=self.ok_count,
        )

    def _build_client(self) -> httpx.AsyncClient:
        """HTTP client for one run: no certificate checks, small idle pool."""
        limits = httpx.Limits(
            max_keepalive_connections=self.settings.max_idle_connections,
            keepalive_expiry=self.settings.idle_timeout,
        )
        transport = self.transport or httpx.AsyncHTTPTransport(verify=False, limits=limits)
        return httpx.AsyncClient(
            transport=transport,
            timeout=httpx.Timeout(self.settings.timeout),
            follow_redirects=False,
        )

    async def _run(self) -> None:
        try:
            if self.settings.warmup_seconds > 0:
                await asyncio.sleep(self.settings.warmup_seconds)

            self.reporter.starting()
            logger.info("http_probe_started", ports=list(self.ports), commands=len(self.commands))

            async with self._build_client() as client:
                for port in self.ports:
                    for command in self.commands:
                        for protocol in command.protocols():
                            await self._probe(client, port, command, protocol)

            logger.info("http_probe_done", **self.summary().model_dump())
            self.reporter.summary(self.summary())
        except Exception:
            logger.exception("http_probe_failed", **self.summary().model_dump())
            raise
        finally:
            self._done.set()

    async def _probe(
        self,
        client: httpx.AsyncClient,
        port: str,
        command: ProbeCommand,
        protocol: str,
    ) -> bool:
        """Try one combination until it succeeds or runs out of attempts."""
        url = target_url(protocol, self.target.host_address, port, command.resource)

        for attempt in range(1, self.max_retry_count + 1):
            call = ProbeCall(
                port=port,
                protocol=protocol,
                method=command.method,
                url=url,
                attempt=attempt,
            )

            try:
                call.status_code = await self._call(client, command, url)
            except Exception as e:
                call.error = str(e) or type(e).__name__
                call.error_kind = classify_error(e)

            self.calls.append(call)
            self.reporter.call(call)

            if call.success:
                self.ok_count += 1
                return True

            self.error_count += 1
            if attempt < self.max_retry_count:
                delay = self.backoff.delay(call.error_kind)
                logger.debug(
                    "http_probe_retry",
                    kind=call.error_kind.value,
                    url=url,
                    attempt=attempt,
                    wait=delay,
                )
                await asyncio.sleep(delay)

        return False

    async def _call(
        self,
        client: httpx.AsyncClient,
        command: ProbeCommand,
        url: str,
    ) -> int:
        """Issue one request, drain the body, and return the status code.

        httpx timeouts apply per connect/read/write step; the whole exchange
        is additionally bounded by ``settings.timeout``.
        """
        self.call_count += 1
        request = build_request(client, command, url)

        try:
            return await asyncio.wait_for(
                self._exchange(client, request),
                timeout=self.settings.timeout,
            )
        except asyncio.TimeoutError as e:
            raise httpx.TimeoutException(
                f"Request exceeded the {self.settings.timeout}s overall timeout",
                request=request,
            ) from e

    async def _exchange(self, client: httpx.AsyncClient, request: httpx.Request) -> int:
        response = await client.send(request, stream=True)
        try:
            async for _ in response.aiter_bytes():
                pass
        finally:
            await response.aclose()

        return response.status_code
