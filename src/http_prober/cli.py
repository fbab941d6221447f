"""HTTP Prober CLI - Main entry point."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from http_prober import __version__
from http_prober.core.config import ProbeSettings, load_commands
from http_prober.core.exceptions import ConfigurationError, ProbeError
from http_prober.core.logging import configure_logging
from http_prober.core.models import DEFAULT_COMMAND, ProbeCommand, ProbeTarget

app = typer.Typer(
    name="http-prober",
    help="Exercise a freshly started service over HTTP with classified retries",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Display version and exit."""
    if value:
        console.print(f"HTTP Prober v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """HTTP Prober - Readiness and exercise probe for containerized services."""
    pass


def parse_port_mapping(spec: str) -> tuple[str, str]:
    """Parse ``HOSTPORT[=CONTAINERPORT]`` into (container key, host port).

    Without a container port the host port doubles as the binding key.
    """
    host_port, _, container_port = spec.partition("=")
    host_port = host_port.strip()
    container_port = container_port.strip()
    if not host_port.isdigit():
        raise ConfigurationError(f"Invalid port mapping '{spec}': host port must be a number")
    return container_port or host_port, host_port


def build_target(
    host: str,
    mappings: list[str],
    exposed: list[str],
    cmd_port: Optional[str],
    evt_port: Optional[str],
) -> ProbeTarget:
    bindings: dict[str, list[str]] = {}
    for spec in mappings:
        key, host_port = parse_port_mapping(spec)
        bindings.setdefault(key, []).append(host_port)

    return ProbeTarget(
        host_address=host,
        port_bindings=bindings,
        cmd_port=cmd_port,
        evt_port=evt_port,
        exposed_ports=exposed,
    )


def collect_commands(specs: list[str], cmd_file: Optional[Path]) -> list[ProbeCommand]:
    """Commands from the command file first, then from --cmd, else the default GET /."""
    commands: list[ProbeCommand] = []
    if cmd_file:
        commands.extend(load_commands(cmd_file))
    commands.extend(ProbeCommand.parse(spec) for spec in specs)
    return commands or [DEFAULT_COMMAND]


@app.command()
def run(
    host: str = typer.Option("127.0.0.1", help="Address the service ports are published on"),
    mappings: Optional[List[str]] = typer.Option(
        None, "--map", "-m", help="Port mapping HOSTPORT[=CONTAINERPORT] (repeatable)"
    ),
    exposed: Optional[List[str]] = typer.Option(
        None, "--expose", "-e", help="Port declared by the image, in declaration order (repeatable)"
    ),
    target_ports: Optional[List[int]] = typer.Option(
        None, "--target-port", "-t", help="Only probe this host port (repeatable, ordered)"
    ),
    cmds: Optional[List[str]] = typer.Option(
        None, "--cmd", "-c", help="Probe command [protocol:]method:resource (repeatable)"
    ),
    cmd_file: Optional[Path] = typer.Option(None, help="JSON/YAML file with probe commands"),
    cmd_port: Optional[str] = typer.Option(None, help="Inspector command port key to exclude"),
    evt_port: Optional[str] = typer.Option(None, help="Inspector event port key to exclude"),
    retry_count: Optional[int] = typer.Option(None, help="Attempts per combination (0 = default)"),
    retry_wait: Optional[float] = typer.Option(None, help="Backoff unit in seconds (0 = default waits)"),
    warmup: Optional[float] = typer.Option(None, help="Seconds to wait before the first call"),
    config: Optional[Path] = typer.Option(None, help="Path to configuration file"),
    print_state: bool = typer.Option(True, "--print-state/--no-print-state", help="Print state lines"),
    prefix: Optional[str] = typer.Option(None, help="Prefix for printed state lines"),
    log_level: str = typer.Option("WARNING", help="Log level"),
    json_logs: bool = typer.Option(False, "--json-logs/--no-json-logs", help="Emit JSON logs"),
) -> None:
    """
    Probe a running service until each endpoint answers or retries run out.
    """
    import asyncio
    from http_prober.prober import ProbeEngine

    settings = ProbeSettings.from_file_or_default(config)
    settings.print_state = print_state
    if retry_count is not None:
        settings.retry_count = retry_count
    if retry_wait is not None:
        settings.retry_wait = retry_wait
    if warmup is not None:
        settings.warmup_seconds = warmup
    if target_ports:
        settings.target_ports = list(target_ports)
    if prefix is not None:
        settings.print_prefix = prefix

    configure_logging(level=log_level, json_format=json_logs, prefix=settings.print_prefix)

    try:
        target = build_target(host, mappings or [], exposed or [], cmd_port, evt_port)
        commands = collect_commands(cmds or [], cmd_file)
    except ConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    async def run_probe():
        engine = ProbeEngine(target, commands, settings)
        engine.start()
        return engine, await engine.wait()

    try:
        engine, summary = asyncio.run(run_probe())
    except ProbeError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(Panel.fit(
        f"[bold cyan]Host:[/bold cyan] {target.host_address}\n"
        f"[bold cyan]Ports:[/bold cyan] {', '.join(engine.ports) or 'none'}\n"
        f"[bold cyan]Commands:[/bold cyan] {len(commands)}",
        title="HTTP Probe",
    ))

    table = Table(title="Probe Summary")
    table.add_column("Calls", style="cyan")
    table.add_column("Count", justify="right")

    table.add_row("Total", str(summary.total))
    table.add_row("Failures", f"[red]{summary.failures}[/red]" if summary.failures else "0")
    table.add_row("Successful", f"[green]{summary.successful}[/green]")

    console.print(table)

    if summary.warning:
        console.print(f"[yellow]⚠ {summary.warning}[/yellow]")
        raise typer.Exit(2)


@app.command()
def ports(
    mappings: Optional[List[str]] = typer.Option(
        None, "--map", "-m", help="Port mapping HOSTPORT[=CONTAINERPORT] (repeatable)"
    ),
    exposed: Optional[List[str]] = typer.Option(
        None, "--expose", "-e", help="Port declared by the image, in declaration order (repeatable)"
    ),
    target_ports: Optional[List[int]] = typer.Option(
        None, "--target-port", "-t", help="Only probe this host port (repeatable, ordered)"
    ),
    cmd_port: Optional[str] = typer.Option(None, help="Inspector command port key to exclude"),
    evt_port: Optional[str] = typer.Option(None, help="Inspector event port key to exclude"),
) -> None:
    """Show the order in which ports would be probed."""
    from http_prober.prober import resolve_ports

    try:
        target = build_target("127.0.0.1", mappings or [], exposed or [], cmd_port, evt_port)
    except ConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    resolved = resolve_ports(
        target.available_ports(),
        target_ports=target_ports or [],
        exposed_ports=target.exposed_ports,
    )
    for port in resolved:
        typer.echo(port)


if __name__ == "__main__":
    app()
