from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse

from ..errors import EnvelopeDecodeError
from ..services.decoder import decode
from ..services.dispatcher import dispatch, encode_result

log = logging.getLogger("daprsvc.messages")

# Mounted at settings.MESSAGE_ROUTE_PREFIX ("/message")
router = APIRouter(tags=["dapr"])


@router.post("/{source_name}/{topic}")
async def deliver(source_name: str, topic: str, req: Request):
    sub = req.app.state.registry.resolve(source_name, topic)
    if sub is None:
        raise HTTPException(404, detail=f"No subscription for pubsub '{source_name}' on topic '{topic}'")

    body = await req.body()
    try:
        msg = decode(sub, body, req.headers)
    except EnvelopeDecodeError as e:
        log.warning("%s", e)
        return PlainTextResponse(str(e), status_code=400)

    result = await dispatch(sub, req, msg)
    return encode_result(result, msg)
