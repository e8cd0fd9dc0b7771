from .message import Message, MessageFields, MessageTrace, is_json_content_type
from .result import MessageResult, ResultStatus, success, retry, drop
from .subscription import MessageHandler, Subscription, SubscriptionDescriptor, SubscriptionOptions
from .cloud_event import CloudEvent, CLOUD_EVENT_CONTENT_TYPE, CLOUD_EVENT_SPEC_VERSION

__all__ = [
    "Message",
    "MessageFields",
    "MessageTrace",
    "is_json_content_type",
    "MessageResult",
    "ResultStatus",
    "success",
    "retry",
    "drop",
    "MessageHandler",
    "Subscription",
    "SubscriptionDescriptor",
    "SubscriptionOptions",
    "CloudEvent",
    "CLOUD_EVENT_CONTENT_TYPE",
    "CLOUD_EVENT_SPEC_VERSION",
]
