from __future__ import annotations

import json
from datetime import datetime, timezone

import httpx
import pytest

from tickload.config import TargetConfig
from tickload.loadgen.client import build_payload, send_request
from tickload.metrics import ErrorType

URL = "http://loadtarget.test/post"


def test_payload_shape() -> None:
    now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    assert build_payload(7, now) == {
        "name": "request #7",
        "date": "2024-05-01T12:00:00+00:00",
        "requests_sent": 7,
    }


@pytest.mark.asyncio
async def test_request_carries_headers_and_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"ok": True})

    target = TargetConfig(url=URL, api_key="abc123")
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        outcome = await send_request(client, target, index=4, tick=2)
        await outcome.response.aclose()

    assert len(seen) == 1
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == URL
    assert request.headers["Content-Type"] == "application/json; charset=UTF-8"
    assert request.headers["X-Api-Key"] == "abc123"
    body = json.loads(request.content)
    assert body["name"] == "request #4"
    assert body["requests_sent"] == 4
    assert isinstance(body["date"], str)

    assert outcome.success
    assert outcome.sequence_index == 4
    assert outcome.tick == 2
    assert outcome.error is None


@pytest.mark.asyncio
async def test_unaccepted_status_keeps_response() -> None:
    async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(500))) as client:
        outcome = await send_request(client, TargetConfig(url=URL), index=1, tick=1)
        await outcome.response.aclose()
    assert not outcome.success
    assert outcome.status_code == 500
    assert outcome.error is None


@pytest.mark.parametrize(
    ("exc_type", "kind"),
    [
        (httpx.ConnectError, ErrorType.CONNECT),
        (httpx.ConnectTimeout, ErrorType.TIMEOUT),
        (httpx.ReadTimeout, ErrorType.TIMEOUT),
        (httpx.ReadError, ErrorType.READ),
        (httpx.RemoteProtocolError, ErrorType.OTHER),
    ],
)
@pytest.mark.asyncio
async def test_transport_failures_are_classified(exc_type: type[httpx.HTTPError], kind: ErrorType) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_type("simulated failure", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        outcome = await send_request(client, TargetConfig(url=URL), index=2, tick=1)

    assert not outcome.success
    assert outcome.response is None
    assert outcome.error is not None
    assert outcome.error.kind is kind
    assert "simulated failure" in str(outcome.error)


@pytest.mark.parametrize(
    "target",
    [
        TargetConfig(url="http://[::1/post"),
        TargetConfig(url=URL, api_key="clé-secrète"),
    ],
)
@pytest.mark.asyncio
async def test_unbuildable_request_becomes_failed_outcome(target: TargetConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("request should never reach the transport")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        outcome = await send_request(client, target, index=1, tick=1)

    assert not outcome.success
    assert outcome.response is None
    assert outcome.error is not None
    assert outcome.error.kind is ErrorType.OTHER
