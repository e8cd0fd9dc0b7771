from __future__ import annotations

import logging
import time
import uuid
from typing import Optional

from fastapi import FastAPI, Request
from starlette.responses import Response

log = logging.getLogger("daprsvc.http")

# What the sidecar makes of a delivery response
DELIVERY_OUTCOMES = {200: "SUCCESS", 400: "DROP", 404: "UNROUTED", 500: "RETRY"}


def delivery_target(path: str, prefix: str) -> Optional[str]:
    """'/message/<pubsub>/<topic>' -> 'pubsub=<pubsub> topic=<topic>', None for other paths."""
    prefix = prefix.rstrip("/") + "/"
    if not path.startswith(prefix):
        return None
    parts = path[len(prefix):].split("/")
    if len(parts) != 2 or not all(parts):
        return None
    return f"pubsub={parts[0]} topic={parts[1]}"


def add_request_logging(app: FastAPI) -> None:
    prefix = app.state.settings.MESSAGE_ROUTE_PREFIX

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        rid = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = rid
        start = time.time()
        path = request.url.path
        target = delivery_target(path, prefix) if request.method == "POST" else None

        if target:
            log.info(
                "DELIVER rid=%s %s traceparent=%s",
                rid,
                target,
                request.headers.get("traceparent"),
            )
        else:
            log.info("REQ rid=%s method=%s path=%s", rid, request.method, path)

        try:
            resp: Response = await call_next(request)
        except Exception:
            dur_ms = int((time.time() - start) * 1000)
            log.exception("ERR rid=%s dur_ms=%s path=%s", rid, dur_ms, path)
            raise

        dur_ms = int((time.time() - start) * 1000)
        if target:
            outcome = DELIVERY_OUTCOMES.get(resp.status_code, "UNKNOWN")
            level = logging.INFO if outcome == "SUCCESS" else logging.WARNING
            log.log(level, "DELIVERED rid=%s %s outcome=%s status=%s dur_ms=%s", rid, target, outcome, resp.status_code, dur_ms)
        else:
            log.info("RES rid=%s status=%s dur_ms=%s path=%s", rid, resp.status_code, dur_ms, path)
        return resp
