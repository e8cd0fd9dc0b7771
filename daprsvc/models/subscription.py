from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Union

from pydantic import BaseModel, Field
from starlette.requests import Request

from .message import Message
from .result import MessageResult

# handler(request, message) -> result; may be sync or async.
# The request is passed through so a handler can check `await request.is_disconnected()`.
MessageHandler = Callable[[Request, Message], Union[MessageResult, Awaitable[MessageResult]]]


@dataclass(frozen=True)
class SubscriptionOptions:
    raw_payload: bool = False    # ask the sidecar not to wrap payloads in a cloud-event
    skip_envelope: bool = False  # hand the request body to the handler without parsing it


@dataclass(frozen=True)
class Subscription:
    source_name: str
    topic: str
    options: SubscriptionOptions
    callback: MessageHandler

    def route(self, prefix: str = "/message") -> str:
        return f"{prefix.rstrip('/')}/{self.source_name}/{self.topic}"


class SubscriptionDescriptor(BaseModel):
    """One entry of the `/dapr/subscribe` discovery payload."""
    pubsubname: str
    topic: str
    route: str
    metadata: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_subscription(cls, sub: Subscription, prefix: str = "/message") -> "SubscriptionDescriptor":
        metadata = {"rawPayload": "true"} if sub.options.raw_payload else {}
        return cls(
            pubsubname=sub.source_name,
            topic=sub.topic,
            route=sub.route(prefix),
            metadata=metadata,
        )
