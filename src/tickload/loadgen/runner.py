from __future__ import annotations

import asyncio
import json

import httpx
from loguru import logger

from tickload.config import RunConfig
from tickload.errors import SerializationError
from tickload.loadgen.dispatcher import BurstDispatcher
from tickload.metrics import Report, ReportSnapshot

# One extra tick covers the latency before the first burst fires.
STARTUP_TICKS = 1


async def run_load(
    config: RunConfig,
    client: httpx.AsyncClient | None = None,
) -> ReportSnapshot:
    config.validate()
    if client is None:
        async with httpx.AsyncClient() as owned:
            return await _execute_load(owned, config)
    return await _execute_load(client, config)


async def _execute_load(client: httpx.AsyncClient, config: RunConfig) -> ReportSnapshot:
    report = Report()
    dispatcher = BurstDispatcher(client=client, config=config, report=report)
    logger.info("Waiting for all requests to be executed...")
    task = asyncio.create_task(dispatcher.run())
    try:
        await asyncio.sleep((config.duration_sec + STARTUP_TICKS) * config.tick_interval_sec)
    finally:
        dispatcher.stop()
        await task
    logger.info("Requests executed successfully.")
    logger.debug("{} tick(s) dispatched", dispatcher.ticks)
    return await report.snapshot()


def render_report(snapshot: ReportSnapshot) -> str:
    try:
        return json.dumps(snapshot.to_dict(), indent=2)
    except (TypeError, ValueError) as exc:
        msg = f"could not render report: {exc}"
        raise SerializationError(msg) from exc
