from __future__ import annotations

import time
from datetime import datetime
from typing import Any, Mapping

import httpx

from tickload.config import TargetConfig
from tickload.errors import TransportError
from tickload.metrics import ErrorType, RequestOutcome


def build_payload(index: int, now: datetime | None = None) -> Mapping[str, Any]:
    now = now or datetime.now().astimezone()
    return {
        "name": f"request #{index}",
        "date": now.isoformat(),
        "requests_sent": index,
    }


async def send_request(
    client: httpx.AsyncClient,
    target: TargetConfig,
    index: int,
    tick: int,
) -> RequestOutcome:
    """POST one request and wrap whatever came back.

    The response is returned unread (streamed); whoever consumes the outcome
    owns closing it.
    """
    start_mono = time.perf_counter()
    try:
        request = client.build_request(
            "POST",
            target.url,
            json=build_payload(index),
            headers=target.headers,
            timeout=target.timeout_sec,
        )
        resp = await client.send(request, stream=True)
    except httpx.TimeoutException as exc:
        err = TransportError(ErrorType.TIMEOUT, str(exc) or type(exc).__name__)
    except httpx.ConnectError as exc:
        err = TransportError(ErrorType.CONNECT, str(exc) or type(exc).__name__)
    except httpx.ReadError as exc:
        err = TransportError(ErrorType.READ, str(exc) or type(exc).__name__)
    except httpx.HTTPError as exc:
        err = TransportError(ErrorType.OTHER, str(exc) or type(exc).__name__)
    # Raised while building the request: unparsable url, non-ASCII header.
    except (httpx.InvalidURL, ValueError) as exc:
        err = TransportError(ErrorType.OTHER, str(exc) or type(exc).__name__)
    else:
        latency_ms = (time.perf_counter() - start_mono) * 1000.0
        return RequestOutcome(sequence_index=index, tick=tick, latency_ms=latency_ms, response=resp)
    latency_ms = (time.perf_counter() - start_mono) * 1000.0
    return RequestOutcome(sequence_index=index, tick=tick, latency_ms=latency_ms, error=err)
