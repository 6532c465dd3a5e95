from __future__ import annotations

from typing import Callable, Iterator

import pytest
from loguru import logger

from tickload.config import RunConfig, TargetConfig

TEST_URL = "http://loadtarget.test/post"


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def make_config() -> Callable[..., RunConfig]:
    def factory(
        requests_per_tick: int = 1,
        duration_sec: int = 1,
        verbose: bool = False,
        tick_interval_sec: float = 0.1,
        api_key: str = "secret-key",
    ) -> RunConfig:
        return RunConfig(
            target=TargetConfig(url=TEST_URL, api_key=api_key, timeout_sec=1.0),
            requests_per_tick=requests_per_tick,
            duration_sec=duration_sec,
            verbose=verbose,
            tick_interval_sec=tick_interval_sec,
        )

    return factory
