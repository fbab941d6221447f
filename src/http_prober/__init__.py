"""HTTP Prober - Exercise a freshly started service over HTTP with classified retries."""

__version__ = "1.0.0"

from http_prober.core.config import ProbeSettings
from http_prober.core.models import ProbeCommand, ProbeSummary, ProbeTarget
from http_prober.prober.engine import ProbeEngine

__all__ = [
    "ProbeSettings",
    "ProbeCommand",
    "ProbeSummary",
    "ProbeTarget",
    "ProbeEngine",
]
