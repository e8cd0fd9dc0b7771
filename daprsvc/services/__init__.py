from .registry import Source, SubscriptionRegistry
from .decoder import decode, metadata_from_headers
from .dispatcher import dispatch, encode_result

__all__ = [
    "Source",
    "SubscriptionRegistry",
    "decode",
    "metadata_from_headers",
    "dispatch",
    "encode_result",
]
