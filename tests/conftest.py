from __future__ import annotations

from contextlib import asynccontextmanager

import orjson
import pytest
from httpx import ASGITransport, AsyncClient

from daprsvc import DaprService, Message, Settings, drop, retry, success

PUBSUB = "servicebus"
TOPIC = "test-topic"

INVOCATION_HEADERS = {
    "dapr-caller-app-id": "test",
    "dapr-callee-app-id": "daprsvc",
}


@pytest.fixture
def cfg() -> Settings:
    return Settings(REQUEST_LOGGING=False)


@pytest.fixture
def svc(cfg: Settings) -> DaprService:
    return DaprService(cfg)


@asynccontextmanager
async def client_for(svc: DaprService):
    async with AsyncClient(transport=ASGITransport(app=svc.http_handler()), base_url="http://test") as ac:
        yield ac


def flag_handler(request, message: Message):
    """Success unless the json payload asks for DROP or RETRY (with optional *_ERROR text)."""
    try:
        data = message.json()
    except ValueError as e:
        return drop(e)
    if data.get("DROP"):
        return drop(data.get("DROP_ERROR"))
    if data.get("RETRY"):
        return retry(data.get("RETRY_ERROR"))
    return success()


def cloud_event(data, **overrides) -> bytes:
    event = {
        "id": "1234-5678",
        "source": "test-case",
        "specversion": "1.0",
        "type": "test-event",
        "datacontenttype": "application/json",
        "data": data,
        "pubsubname": PUBSUB,
        "topic": TOPIC,
    }
    event.update(overrides)
    return orjson.dumps(event)


def cloud_event_with_raw_data(data: bytes, **overrides) -> bytes:
    """Envelope whose `data` member is spliced in byte for byte."""
    head = cloud_event(None, **overrides).replace(b',"data":null', b"")
    assert head.endswith(b"}")
    return head[:-1] + b', "data" : ' + data + b"\n}"
