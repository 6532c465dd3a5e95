from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from functools import partial

import httpx
from loguru import logger

from tickload.config import RunConfig
from tickload.loadgen.client import send_request
from tickload.loadgen.collector import END_OF_BURST, OutcomeCollector, OutcomeQueue
from tickload.metrics import Report


@dataclass(slots=True)
class BurstDispatcher:
    """Fires one burst of concurrent requests per tick until stopped.

    Bursts run as independent tasks, so a burst slower than the tick interval
    overlaps with the next one instead of delaying it.
    """

    client: httpx.AsyncClient
    config: RunConfig
    report: Report
    ticks: int = 0
    _stop: asyncio.Event = field(default_factory=asyncio.Event)
    _bursts: set[asyncio.Task[None]] = field(default_factory=set)

    def stop(self) -> None:
        self._stop.set()

    @property
    def in_flight(self) -> int:
        return len(self._bursts)

    async def run(self) -> None:
        started_mono = time.perf_counter()
        try:
            while True:
                await self._wait_for_tick(started_mono)
                if self._stop.is_set():
                    return
                self.ticks += 1
                task = asyncio.create_task(self.run_burst(self.ticks))
                self._bursts.add(task)
                task.add_done_callback(partial(self._burst_done, self.ticks))
        finally:
            await self._cancel_bursts()

    def _burst_done(self, tick: int, task: asyncio.Task[None]) -> None:
        self._bursts.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.opt(exception=task.exception()).error("burst #{} failed", tick)

    async def run_burst(self, tick: int) -> None:
        logger.info("buffer # {}", tick)
        successes: OutcomeQueue = asyncio.Queue()
        errors: OutcomeQueue = asyncio.Queue()
        collectors = [
            asyncio.create_task(OutcomeCollector(tick, self.config.verbose).run(successes)),
            asyncio.create_task(OutcomeCollector(tick, self.config.verbose, errors=True).run(errors)),
        ]
        try:
            await asyncio.gather(
                *(
                    self._worker(index, tick, successes, errors)
                    for index in range(1, self.config.requests_per_tick + 1)
                )
            )
        finally:
            successes.put_nowait(END_OF_BURST)
            errors.put_nowait(END_OF_BURST)
            ok, failed = await asyncio.gather(*collectors)
            logger.debug(
                "burst #{} done: {} requests, {} ok, {} failed",
                tick,
                self.config.requests_per_tick,
                ok,
                failed,
            )

    async def _worker(
        self,
        index: int,
        tick: int,
        successes: OutcomeQueue,
        errors: OutcomeQueue,
    ) -> None:
        outcome = await send_request(self.client, self.config.target, index, tick)
        queue = successes if outcome.success else errors
        queue.put_nowait(outcome)
        await self.report.record(outcome)

    async def _wait_for_tick(self, started_mono: float) -> None:
        target = started_mono + (self.ticks + 1) * self.config.tick_interval_sec
        delay = max(0.0, target - time.perf_counter())
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=delay)
        except asyncio.TimeoutError:
            pass

    async def _cancel_bursts(self) -> None:
        pending = list(self._bursts)
        for task in pending:
            task.cancel()
        if pending:
            logger.debug("cancelling {} in-flight burst(s)", len(pending))
            await asyncio.gather(*pending, return_exceptions=True)
