from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass

import httpx
from loguru import logger

from tickload.metrics import RequestOutcome

# Closes a burst's queue; collectors stop once they receive it.
END_OF_BURST = None

OutcomeQueue = asyncio.Queue[RequestOutcome | None]


def pretty_body(raw: bytes) -> str:
    text = raw.decode("utf-8", errors="replace")
    try:
        return json.dumps(json.loads(text), indent=2)
    except ValueError:
        return text


@dataclass(slots=True)
class OutcomeCollector:
    """Drains one outcome queue of one burst and logs what it sees."""

    tick: int
    verbose: bool
    errors: bool = False
    seen: int = 0

    async def run(self, queue: OutcomeQueue) -> int:
        while True:
            outcome = await queue.get()
            if outcome is END_OF_BURST:
                return self.seen
            self.seen += 1
            try:
                await self._handle(outcome)
            finally:
                if outcome.response is not None:
                    await outcome.response.aclose()

    async def _handle(self, outcome: RequestOutcome) -> None:
        if self.errors:
            await self._log_error(outcome)
        else:
            await self._log_success(outcome)

    async def _log_success(self, outcome: RequestOutcome) -> None:
        logger.info(
            "request #{} >> http status response {}",
            outcome.sequence_index,
            outcome.status_code,
        )
        if not self.verbose:
            return
        body = await self._read_body(outcome.sequence_index, outcome.response)
        if body is not None:
            logger.info("request #{} >> response: {}", outcome.sequence_index, pretty_body(body))

    async def _log_error(self, outcome: RequestOutcome) -> None:
        if outcome.error is not None:
            logger.warning("error on request #{} >> {}", outcome.sequence_index, outcome.error)
            return
        logger.warning(
            "error on request #{} >> http status code: {}",
            outcome.sequence_index,
            outcome.status_code,
        )
        if not self.verbose:
            return
        body = await self._read_body(outcome.sequence_index, outcome.response)
        if body:
            logger.info("request #{} >> response: {}", outcome.sequence_index, pretty_body(body))

    async def _read_body(self, index: int, response: httpx.Response) -> bytes | None:
        try:
            return await response.aread()
        except httpx.HTTPError as exc:
            logger.error("request #{} >> failed to read response body: {}", index, exc)
            return None
