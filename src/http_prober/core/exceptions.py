"""Custom exceptions for HTTP Prober.

Probe attempt failures are classified and retried inside the engine, so
most of these never escape a run. They exist for the seams where a caller
can actually do something: loading configuration and driving the engine.
"""

from __future__ import annotations


class HTTPProberError(Exception):
    """Base exception for all HTTP Prober errors.

    All custom exceptions inherit from this class, allowing callers to
    catch all HTTP Prober-specific errors with a single except clause.
    """
    pass


class ConfigurationError(HTTPProberError):
    """Raised when probe commands or settings cannot be loaded.

    This includes failures in:
    - Command file parsing (JSON/YAML)
    - Short-form command specs given on the command line
    - Port mapping specs given on the command line
    """
    pass


class ProbeError(HTTPProberError):
    """Raised during probe execution."""
    pass


class RequestBuildError(ProbeError):
    """Raised when an HTTP request cannot be constructed.

    A malformed method or URL makes a single attempt fail; the engine
    counts it and moves on like any other failed call.
    """
    pass


class ProbeStateError(ProbeError):
    """Raised when the engine lifecycle is misused (e.g. started twice)."""
    pass
