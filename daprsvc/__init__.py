from .errors import DaprSvcError, EnvelopeDecodeError, InvalidMessageResultError
from .models import (
    Message,
    MessageFields,
    MessageHandler,
    MessageResult,
    MessageTrace,
    Subscription,
    SubscriptionOptions,
    drop,
    retry,
    success,
)
from .service import DaprService
from .services.registry import Source, SubscriptionRegistry
from .settings import Settings

__all__ = [
    "DaprService",
    "DaprSvcError",
    "EnvelopeDecodeError",
    "InvalidMessageResultError",
    "Message",
    "MessageFields",
    "MessageHandler",
    "MessageResult",
    "MessageTrace",
    "Settings",
    "Source",
    "Subscription",
    "SubscriptionOptions",
    "SubscriptionRegistry",
    "drop",
    "retry",
    "success",
]
