# daprsvc/main.py
# Demo application: `python -m daprsvc.main` or `uvicorn daprsvc.main:app`
from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI, Request

from . import DaprService, Message, drop, retry, success
from .logger import setup_logging
from .settings import settings

setup_logging()
log = logging.getLogger("daprsvc.demo")

svc = DaprService(settings)

# Service invocation: plain FastAPI app, reached through the sidecar
api = FastAPI(title=f"{settings.SERVICE_NAME} invocation")


@api.get("/hello")
async def hello():
    return {"message": "Hello"}


svc.set_invocation_handler(api)

# Pub/sub
orders = svc.create_source("pubsub")


@orders.topic("orders")
async def on_order(request: Request, message: Message):
    try:
        order = message.json()
    except ValueError as e:
        return drop(e)
    if not isinstance(order, dict) or "id" not in order:
        return drop("order without id")
    if await request.is_disconnected():
        return retry("client went away")
    log.info("order received id=%s subject=%s", order["id"], message.fields.subject)
    return success()


@orders.topic("audit", raw_payload=True, skip_envelope=True)
def on_audit(request: Request, message: Message):
    log.info("audit entry bytes=%d metadata=%s", len(message.data), message.metadata)
    return success()


app = svc.http_handler()

if __name__ == "__main__":
    uvicorn.run(
        "daprsvc.main:app",
        host=settings.HOST,
        port=settings.PORT,
    )
