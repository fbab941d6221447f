"""Prober module - Port resolution and the background probe engine."""

from http_prober.prober.engine import ProbeEngine
from http_prober.prober.ports import resolve_ports
from http_prober.prober.retry import BackoffPolicy, classify_error

__all__ = [
    "ProbeEngine",
    "resolve_ports",
    "BackoffPolicy",
    "classify_error",
]
