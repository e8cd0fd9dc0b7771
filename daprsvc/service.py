from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import ORJSONResponse
from starlette.types import ASGIApp

from .middleware.invocation import InvocationInterceptor
from .middleware.request_logging import add_request_logging
from .routers import health_router, message_router, subscribe_router
from .services.registry import Source, SubscriptionRegistry
from .settings import Settings, settings as default_settings

log = logging.getLogger("daprsvc")


class DaprService:
    """
    Application side of the Dapr sidecar contract.

    Build one at start-up, register pub/sub sources and topics and an optional
    invocation handler, then hand `http_handler()` to an ASGI server:

        svc = DaprService()
        orders = svc.create_source("servicebus")
        orders.subscribe("order", on_order)
        svc.set_invocation_handler(api)
        uvicorn.run(svc.http_handler())

    Registration is not thread-safe and must be finished before serving.
    """
    def __init__(self, cfg: Optional[Settings] = None) -> None:
        self.settings = cfg or default_settings
        self.registry = SubscriptionRegistry()
        self._invocation_handler: Optional[ASGIApp] = None
        self._app: Optional[InvocationInterceptor] = None

    def create_source(self, name: str) -> Source:
        return self.registry.create_source(name)

    def set_invocation_handler(self, handler: Optional[ASGIApp]) -> None:
        self._invocation_handler = handler
        if self._app is not None:
            self._app.invocation_app = handler

    def _build_pubsub_app(self) -> FastAPI:
        cfg = self.settings
        app = FastAPI(
            title=cfg.SERVICE_NAME,
            default_response_class=ORJSONResponse,
            docs_url=None,
            redoc_url=None,
            openapi_url=None,
        )
        app.state.settings = cfg
        app.state.registry = self.registry

        if cfg.REQUEST_LOGGING:
            add_request_logging(app)

        app.include_router(health_router)
        app.include_router(subscribe_router, prefix=cfg.SUBSCRIBE_PATH)
        app.include_router(message_router, prefix=cfg.MESSAGE_ROUTE_PREFIX.rstrip("/"))
        return app

    def http_handler(self) -> InvocationInterceptor:
        """The ASGI app serving both pub/sub delivery and service invocation. Built once."""
        if self._app is None:
            cfg = self.settings
            self._app = InvocationInterceptor(
                self._build_pubsub_app(),
                self._invocation_handler,
                invocation_headers=cfg.invocation_headers,
                marker_header=cfg.INVOCATION_MARKER_HEADER,
            )
            log.info(
                "daprsvc app built subscriptions=%d invocation_handler=%s",
                len(self.registry),
                self._invocation_handler is not None,
            )
        return self._app
