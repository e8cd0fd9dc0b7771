from __future__ import annotations

import functools
import inspect
import logging
from typing import Any, Dict

from fastapi.responses import ORJSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import Response

from ..errors import InvalidMessageResultError
from ..models.message import Message
from ..models.result import MessageResult, ResultStatus, is_drop, is_retry, is_success
from ..models.subscription import Subscription

log = logging.getLogger("daprsvc.dispatcher")

INVALID_RESULT_TEXT = "Invalid message handler result."


async def dispatch(subscription: Subscription, request: Request, message: Message) -> Any:
    """
    Run the subscription's handler. Coroutine handlers are awaited on the event
    loop; plain functions run in the threadpool, as FastAPI does for sync endpoints.
    """
    if _is_async_callable(subscription.callback):
        return await subscription.callback(request, message)
    result = await run_in_threadpool(subscription.callback, request, message)
    if inspect.isawaitable(result):
        result = await result
    return result


def _is_async_callable(obj: Any) -> bool:
    while isinstance(obj, functools.partial):
        obj = obj.func
    return inspect.iscoroutinefunction(obj) or inspect.iscoroutinefunction(getattr(obj, "__call__", None))


def _status_body(status: ResultStatus, result: MessageResult) -> Dict[str, str]:
    body = {"status": status.value}
    if result.error is not None:
        body["error"] = result.error_message
    return body


def encode_result(result: Any, message: Message) -> Response:
    """
    success -> 200 {"status":"SUCCESS"}
    retry   -> 500 {"status":"RETRY"[, "error": ...]}
    drop    -> 400 {"status":"DROP"[, "error": ...]}
    other   -> 400 text/plain
    """
    if is_success(result):
        log.debug("Message handled pubsub=%s topic=%s id=%s", message.source_name, message.topic, message.id)
        return ORJSONResponse({"status": ResultStatus.SUCCESS.value}, status_code=200)

    if is_retry(result):
        log.error(
            "Message handler asked for retry pubsub=%s topic=%s id=%s error=%s",
            message.source_name, message.topic, message.id, result.error_message,
        )
        return ORJSONResponse(_status_body(ResultStatus.RETRY, result), status_code=500)

    if is_drop(result):
        log.error(
            "Message handler dropped message pubsub=%s topic=%s id=%s error=%s",
            message.source_name, message.topic, message.id, result.error_message,
        )
        return ORJSONResponse(_status_body(ResultStatus.DROP, result), status_code=400)

    log.error("%s pubsub=%s topic=%s", InvalidMessageResultError(result), message.source_name, message.topic)
    return PlainTextResponse(INVALID_RESULT_TEXT, status_code=400)
