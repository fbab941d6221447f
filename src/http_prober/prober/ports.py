"""Port resolution: which host ports to probe, and in which order."""

from __future__ import annotations

from typing import Iterable, Optional

from http_prober.core.logging import get_logger

logger = get_logger(__name__)


def _port_number(port: str) -> str:
    """Strip a transport suffix ('8080/tcp' -> '8080')."""
    return port.split("/", 1)[0].strip()


def resolve_ports(
    available: Iterable[str],
    target_ports: Optional[Iterable[int]] = None,
    exposed_ports: Optional[Iterable[str]] = None,
) -> list[str]:
    """
    Compute the ordered list of ports to probe.

    With an explicit target list, only those targets that are available are
    kept, in the caller's order. Otherwise the ports exposed by the image are
    tried first, last-declared first, followed by every other available port.

    Args:
        available: Host-facing ports, excluding the inspector's own ports
        target_ports: Optional explicit port filter
        exposed_ports: Optional ports declared by the image, in declaration order

    Returns:
        Ordered port identifiers; may be empty. A target listed twice is
        tried twice
    """
    remaining = {str(port) for port in available}
    logger.debug("http_probe_available_ports", ports=sorted(remaining))

    ports: list[str] = []

    targets = list(target_ports or [])
    if targets:
        for number in targets:
            port = str(number)
            if port in remaining:
                ports.append(port)
            else:
                logger.debug("http_probe_ignoring_port", port=port)
        logger.debug("http_probe_filtered_ports", ports=ports)
        return ports

    for exposed in reversed(list(exposed_ports or [])):
        port = _port_number(str(exposed))
        if port in remaining:
            ports.append(port)
            remaining.discard(port)

    # The tail has no defined order
    ports.extend(remaining)
    return ports
