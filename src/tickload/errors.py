from __future__ import annotations

from tickload.metrics.models import ErrorType


class TickloadError(Exception):
    """Base class for every error raised by tickload."""


class ConfigurationError(TickloadError, ValueError):
    pass


class SerializationError(TickloadError):
    pass


class TransportError(TickloadError):
    """A request that produced no HTTP response at all.

    Attached to the outcome rather than raised; the worker that hit it keeps going.
    """

    def __init__(self, kind: ErrorType, message: str) -> None:
        super().__init__(message)
        self.kind = kind

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.args[0]}"
