from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Mapping

import httpx

if TYPE_CHECKING:
    from tickload.errors import TransportError

ACCEPTED_STATUSES = frozenset({200, 201, 202, 204})


class ErrorType(str, Enum):
    TIMEOUT = "timeout"
    CONNECT = "connect"
    READ = "read"
    OTHER = "other"


def is_accepted(status_code: int) -> bool:
    return status_code in ACCEPTED_STATUSES


@dataclass(frozen=True, slots=True)
class RequestOutcome:
    sequence_index: int
    tick: int
    latency_ms: float
    response: httpx.Response | None = None
    error: TransportError | None = None

    def __post_init__(self) -> None:
        if (self.response is None) == (self.error is None):
            msg = "an outcome carries either a response or an error"
            raise ValueError(msg)

    @property
    def success(self) -> bool:
        return self.response is not None and is_accepted(self.response.status_code)

    @property
    def status_code(self) -> int | None:
        return self.response.status_code if self.response is not None else None


@dataclass(frozen=True, slots=True)
class ReportSnapshot:
    total_requests: int
    total_success: int
    total_fail: int

    def to_dict(self) -> Mapping[str, int]:
        return {
            "TotalRequests": self.total_requests,
            "TotalSuccess": self.total_success,
            "TotalFail": self.total_fail,
        }
