"""Line-oriented key=value state reporting for probe runs."""

from __future__ import annotations

from datetime import timezone
from typing import Optional

from rich.console import Console

from http_prober.core.models import ProbeCall, ProbeSummary

# Plain output: lines are parsed by whoever watches stdout
console = Console(markup=False, highlight=False, emoji=False, soft_wrap=True)


class StateReporter:
    """Prints probe state lines when enabled; otherwise does nothing."""

    def __init__(
        self,
        enabled: bool,
        prefix: str,
        output: Optional[Console] = None,
    ):
        self.enabled = enabled
        self.prefix = prefix
        self.output = output or console

    def _emit(self, line: str) -> None:
        if self.enabled:
            self.output.print(f"{self.prefix} {line}".strip())

    def starting(self) -> None:
        self._emit("state=http.probe.starting")

    def call(self, call: ProbeCall) -> None:
        timestamp = call.timestamp.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        self._emit(
            f"info=http.probe.call status={call.status_code} method={call.method} "
            f"target={call.url} attempt={call.attempt} error={call.error} time={timestamp}"
        )

    def summary(self, summary: ProbeSummary) -> None:
        self._emit(
            f"info=http.probe.summary total={summary.total} "
            f"failures={summary.failures} successful={summary.successful}"
        )
        warning = f"warning={summary.warning}" if summary.warning else ""
        self._emit(f"state=http.probe.done {warning}".strip())
