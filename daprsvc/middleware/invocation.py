"""
Service invocation requests and pub/sub traffic arrive on the same port.

The sidecar tags invocation calls with the caller and callee app-id headers;
those requests go to the application's own ASGI app, everything else to the
pub/sub app underneath.
"""
from __future__ import annotations

from typing import Iterable, Mapping, Optional

from starlette.datastructures import Headers, MutableHeaders
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

DEFAULT_INVOCATION_HEADERS = ("dapr-caller-app-id", "dapr-callee-app-id")
DEFAULT_MARKER_HEADER = "X-Daprsvc-Invocation"


def is_invocation_request(headers: Mapping[str, str], required: Iterable[str] = DEFAULT_INVOCATION_HEADERS) -> bool:
    # presence only, values are not checked
    return all(name.lower() in headers for name in required)


class InvocationInterceptor:
    """
    ASGI wrapper: invocation requests go to `invocation_app` (404 when unset)
    and always get the marker header; any other request goes to `app`.
    """
    def __init__(
        self,
        app: ASGIApp,
        invocation_app: Optional[ASGIApp] = None,
        *,
        invocation_headers: Iterable[str] = DEFAULT_INVOCATION_HEADERS,
        marker_header: str = DEFAULT_MARKER_HEADER,
    ) -> None:
        self.app = app
        self.invocation_app = invocation_app
        self.invocation_headers = tuple(h.lower() for h in invocation_headers)
        self.marker_header = marker_header

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not is_invocation_request(Headers(scope=scope), self.invocation_headers):
            await self.app(scope, receive, send)
            return

        async def send_with_marker(message: Message) -> None:
            if message["type"] == "http.response.start":
                # "headers" is optional in ASGI
                message.setdefault("headers", [])
                MutableHeaders(scope=message)[self.marker_header] = "1"
            await send(message)

        target = self.invocation_app or PlainTextResponse("Not Found", status_code=404)
        await target(scope, receive, send_with_marker)
