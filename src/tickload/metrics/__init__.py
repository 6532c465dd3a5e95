from __future__ import annotations

from tickload.metrics.models import (
    ACCEPTED_STATUSES,
    ErrorType,
    ReportSnapshot,
    RequestOutcome,
    is_accepted,
)
from tickload.metrics.report import Report

__all__ = [
    "ACCEPTED_STATUSES",
    "ErrorType",
    "Report",
    "ReportSnapshot",
    "RequestOutcome",
    "is_accepted",
]
