from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from daprsvc import DaprService, Settings
from daprsvc.middleware.invocation import is_invocation_request

from .conftest import INVOCATION_HEADERS, client_for


def hello_app() -> FastAPI:
    api = FastAPI()

    @api.get("/hello", response_class=PlainTextResponse)
    async def hello():
        return "Hello"

    @api.post("/teapot", response_class=PlainTextResponse, status_code=418)
    async def teapot():
        return "short and stout"

    return api


async def test_invocation_without_handler_is_404_with_marker(svc):
    async with client_for(svc) as ac:
        res = await ac.get("/", headers=INVOCATION_HEADERS)
    assert res.status_code == 404
    assert res.headers["x-daprsvc-invocation"] == "1"


async def test_invocation_without_handler_shadows_pubsub_routes(svc):
    async with client_for(svc) as ac:
        res = await ac.get("/dapr/subscribe", headers=INVOCATION_HEADERS)
    assert res.status_code == 404
    assert res.headers["x-daprsvc-invocation"] == "1"


async def test_invocation_forwards_to_handler(svc):
    svc.set_invocation_handler(hello_app())
    async with client_for(svc) as ac:
        res = await ac.get("/hello", headers=INVOCATION_HEADERS)
        teapot = await ac.post("/teapot", headers=INVOCATION_HEADERS)
    assert res.status_code == 200
    assert res.text == "Hello"
    assert res.headers["x-daprsvc-invocation"] == "1"
    assert teapot.status_code == 418
    assert teapot.text == "short and stout"
    assert teapot.headers["x-daprsvc-invocation"] == "1"


async def test_invocation_handler_set_after_app_is_built(svc):
    app = svc.http_handler()
    svc.set_invocation_handler(hello_app())
    assert svc.http_handler() is app
    async with client_for(svc) as ac:
        res = await ac.get("/hello", headers=INVOCATION_HEADERS)
    assert res.status_code == 200
    assert res.text == "Hello"


async def test_handler_404_still_carries_marker(svc):
    svc.set_invocation_handler(hello_app())
    async with client_for(svc) as ac:
        res = await ac.get("/missing", headers=INVOCATION_HEADERS)
    assert res.status_code == 404
    assert res.headers["x-daprsvc-invocation"] == "1"


async def test_one_identity_header_is_not_an_invocation(svc):
    svc.set_invocation_handler(hello_app())
    async with client_for(svc) as ac:
        res = await ac.get("/healthz", headers={"dapr-caller-app-id": "test"})
        hello = await ac.get("/hello", headers={"dapr-callee-app-id": "daprsvc"})
    assert res.status_code == 200
    assert "x-daprsvc-invocation" not in res.headers
    assert hello.status_code == 404
    assert "x-daprsvc-invocation" not in hello.headers


async def test_header_values_are_not_checked(svc):
    async with client_for(svc) as ac:
        res = await ac.get("/", headers={"dapr-caller-app-id": "", "dapr-callee-app-id": ""})
    assert res.headers["x-daprsvc-invocation"] == "1"


async def test_configured_header_names():
    svc = DaprService(
        Settings(
            REQUEST_LOGGING=False,
            CALLER_HEADER="X-Caller",
            CALLEE_HEADER="X-Callee",
            INVOCATION_MARKER_HEADER="X-Invoked",
        )
    )
    async with client_for(svc) as ac:
        res = await ac.get("/", headers={"x-caller": "a", "x-callee": "b"})
        default = await ac.get("/healthz", headers=INVOCATION_HEADERS)
    assert res.status_code == 404
    assert res.headers["x-invoked"] == "1"
    assert default.status_code == 200
    assert "x-invoked" not in default.headers


def test_is_invocation_request():
    assert is_invocation_request({"dapr-caller-app-id": "a", "dapr-callee-app-id": "b"})
    assert not is_invocation_request({"dapr-caller-app-id": "a"})
    assert not is_invocation_request({})


async def bare_asgi_app(scope, receive, send):
    # "headers" left out of the start message
    await send({"type": "http.response.start", "status": 202})
    await send({"type": "http.response.body", "body": b"accepted"})


async def test_marker_added_when_handler_sends_no_headers(svc):
    svc.set_invocation_handler(bare_asgi_app)
    async with client_for(svc) as ac:
        res = await ac.post("/jobs", headers=INVOCATION_HEADERS)
    assert res.status_code == 202
    assert res.text == "accepted"
    assert res.headers["x-daprsvc-invocation"] == "1"
