from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from tickload.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class TargetConfig:
    url: str
    api_key: str = ""
    timeout_sec: float = 10.0

    @property
    def headers(self) -> Mapping[str, str]:
        return {
            "Content-Type": "application/json; charset=UTF-8",
            "X-Api-Key": self.api_key,
        }


@dataclass(frozen=True, slots=True)
class RunConfig:
    target: TargetConfig
    requests_per_tick: int
    duration_sec: int
    verbose: bool = False
    tick_interval_sec: float = 1.0

    def validate(self) -> None:
        if not self.target.url:
            msg = "target url must not be empty"
            raise ConfigurationError(msg)
        _check_url(self.target.url)
        if not self.target.api_key.isascii():
            msg = "api key must contain only ASCII characters"
            raise ConfigurationError(msg)
        if self.requests_per_tick <= 0:
            msg = f"requests per tick must be positive, got {self.requests_per_tick}"
            raise ConfigurationError(msg)
        if self.duration_sec <= 0:
            msg = f"duration must be positive, got {self.duration_sec}"
            raise ConfigurationError(msg)
        if self.target.timeout_sec <= 0:
            msg = f"timeout must be positive, got {self.target.timeout_sec}"
            raise ConfigurationError(msg)
        if self.tick_interval_sec <= 0:
            msg = f"tick interval must be positive, got {self.tick_interval_sec}"
            raise ConfigurationError(msg)

    def to_metadata(self) -> Mapping[str, Any]:
        return {
            "url": self.target.url,
            "key": _mask(self.target.api_key),
            "rqs": self.requests_per_tick,
            "duration": self.duration_sec,
            "timeout": self.target.timeout_sec,
            "verbose": self.verbose,
        }


def _check_url(url: str) -> None:
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        msg = f"invalid target url {url!r}: {exc}"
        raise ConfigurationError(msg) from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        msg = f"target url needs an http(s) scheme and a host, got {url!r}"
        raise ConfigurationError(msg)


def _mask(secret: str) -> str:
    if len(secret) <= 4:
        return "*" * len(secret)
    return secret[:4] + "*" * (len(secret) - 4)
