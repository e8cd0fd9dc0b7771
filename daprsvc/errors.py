from __future__ import annotations


class DaprSvcError(Exception):
    """Base class for errors raised by daprsvc."""


class EnvelopeDecodeError(DaprSvcError):
    """
    The request body could not be turned into a Message for a subscription.

    Never reaches the application callback; the message route answers 400
    with `str(exc)` as a plaintext body.
    """

    def __init__(self, source_name: str, topic: str, reason: str):
        self.source_name = source_name
        self.topic = topic
        self.reason = reason
        super().__init__(
            f"Failed to parse event message for pubsub '{source_name}' on topic '{topic}': {reason}"
        )


class InvalidMessageResultError(DaprSvcError):
    """A message handler returned something other than success/retry/drop."""

    def __init__(self, result: object):
        self.result = result
        super().__init__(f"Invalid message handler result: {result!r}")
