from __future__ import annotations

import argparse
import asyncio
import os
import sys
from typing import Sequence

from loguru import logger

from tickload.config import RunConfig, TargetConfig
from tickload.errors import ConfigurationError, SerializationError
from tickload.loadgen.runner import render_report, run_load
from tickload.logging import setup_logging

DEFAULT_URL = "https://postman-echo.com/post"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rate-controlled HTTP POST load generator")
    parser.add_argument("--url", default=DEFAULT_URL, help="the server POST url")
    parser.add_argument(
        "--key",
        default=os.environ.get("TICKLOAD_API_KEY", ""),
        help="the server API key (default: $TICKLOAD_API_KEY)",
    )
    parser.add_argument("--rqs", type=int, default=10, help="requests per second")
    parser.add_argument("--duration", type=int, default=1, help="duration in seconds")
    parser.add_argument("--timeout", type=float, default=10.0, help="per-request timeout in seconds")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="whether to print out the response of each request or not",
    )
    return parser


def _config_from_args(args: argparse.Namespace) -> RunConfig:
    return RunConfig(
        target=TargetConfig(url=args.url, api_key=args.key, timeout_sec=args.timeout),
        requests_per_tick=args.rqs,
        duration_sec=args.duration,
        verbose=args.verbose,
    )


def _fail(exc: Exception) -> int:
    print(f"error: {exc}", file=sys.stderr)
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    config = _config_from_args(args)
    try:
        config.validate()
    except ConfigurationError as exc:
        return _fail(exc)
    for key, value in config.to_metadata().items():
        logger.info("{}: {}", key, value)

    snapshot = asyncio.run(run_load(config))

    logger.info("--------------------REPORT--------------------")
    try:
        print(render_report(snapshot))
    except SerializationError as exc:
        return _fail(exc)
    return 0


if __name__ == "__main__":
    sys.exit(main())
