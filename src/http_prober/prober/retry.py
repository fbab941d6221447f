"""Failure classification and backoff for probe retries."""

from __future__ import annotations

import ssl
from dataclasses import dataclass

import httpx

from http_prober.core.models import ErrorKind

DEFAULT_RETRY_COUNT = 5

DEFAULT_NOT_READY_WAIT = 16.0
DEFAULT_TRANSPORT_ERROR_WAIT = 8.0
DEFAULT_OTHER_ERROR_WAIT = 4.0


def _closed_on_connect(exc: BaseException) -> bool:
    """True if the server closed the stream before sending anything.

    Other protocol violations (a garbled status line, a bad header) mean
    something answered, so they are not treated as "not ready".
    """
    if isinstance(exc, httpx.RemoteProtocolError) and "server disconnected" in str(exc).lower():
        return True

    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, (EOFError, ssl.SSLEOFError)):
            return True
        current = current.__cause__ or current.__context__
    return False


def classify_error(exc: BaseException) -> ErrorKind:
    """
    Put a failed attempt into its backoff bucket.

    A transport error caused by an immediate end-of-stream means the port is
    published but nothing is serving it yet. Any other transport error is a
    generic web error. Everything else lands in OTHER.
    """
    if isinstance(exc, httpx.TransportError):
        if _closed_on_connect(exc):
            return ErrorKind.NOT_READY
        return ErrorKind.TRANSPORT_ERROR
    return ErrorKind.OTHER


def max_retry_count(retry_count: int) -> int:
    """Attempts per combination; non-positive values mean the default."""
    if retry_count > 0:
        return retry_count
    return DEFAULT_RETRY_COUNT


@dataclass(frozen=True)
class BackoffPolicy:
    """Seconds to wait after a failure, per classification bucket."""

    not_ready: float = DEFAULT_NOT_READY_WAIT
    transport_error: float = DEFAULT_TRANSPORT_ERROR_WAIT
    other: float = DEFAULT_OTHER_ERROR_WAIT

    @classmethod
    def from_retry_wait(cls, retry_wait: float) -> "BackoffPolicy":
        """Scale the waits from a base unit; non-positive keeps the defaults."""
        if retry_wait > 0:
            return cls(
                not_ready=retry_wait * 2,
                transport_error=retry_wait,
                other=retry_wait / 2,
            )
        return cls()

    def delay(self, kind: ErrorKind) -> float:
        return {
            ErrorKind.NOT_READY: self.not_ready,
            ErrorKind.TRANSPORT_ERROR: self.transport_error,
            ErrorKind.OTHER: self.other,
        }[kind]
