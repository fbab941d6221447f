"""Core module - Configuration, models, logging, and exceptions."""

from http_prober.core.config import ProbeSettings, load_commands
from http_prober.core.models import (
    ErrorKind,
    ProbeCall,
    ProbeCommand,
    ProbeSummary,
    ProbeTarget,
)

__all__ = [
    "ProbeSettings",
    "load_commands",
    "ErrorKind",
    "ProbeCall",
    "ProbeCommand",
    "ProbeSummary",
    "ProbeTarget",
]
