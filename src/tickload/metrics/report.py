from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from tickload.metrics.models import ReportSnapshot, RequestOutcome


@dataclass(slots=True)
class Report:
    """Run-wide request counters shared by every worker.

    All mutation goes through :meth:`record`, which updates the total and
    exactly one of success/fail under the same lock, so any snapshot satisfies
    ``total_success + total_fail == total_requests``.
    """

    total_requests: int = 0
    total_success: int = 0
    total_fail: int = 0
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    async def record(self, outcome: RequestOutcome) -> None:
        async with self._lock:
            self.total_requests += 1
            if outcome.success:
                self.total_success += 1
            else:
                self.total_fail += 1

    async def snapshot(self) -> ReportSnapshot:
        async with self._lock:
            return ReportSnapshot(
                total_requests=self.total_requests,
                total_success=self.total_success,
                total_fail=self.total_fail,
            )
