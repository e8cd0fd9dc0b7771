"""
Turns an inbound pub/sub request into a Message.

Two shapes are accepted, depending on the subscription options:
  - skip_envelope: the body is the payload, nothing else is checked
  - otherwise: a structured CloudEvents 1.0 JSON envelope addressed to the
    subscription's pubsub/topic

For JSON payloads the handler gets the exact bytes of the envelope's `data`
member, so number precision and formatting are left alone.
"""
from __future__ import annotations

import base64
import binascii
import json
import re
from datetime import datetime
from json.decoder import scanstring
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import AwareDatetime, TypeAdapter, ValidationError
from starlette.datastructures import Headers

from ..errors import EnvelopeDecodeError
from ..models.cloud_event import CloudEvent, CLOUD_EVENT_CONTENT_TYPE, CLOUD_EVENT_SPEC_VERSION
from ..models.message import Message, MessageFields, MessageTrace, is_json_content_type
from ..models.subscription import Subscription

METADATA_HEADER_PREFIX = "metadata."

# YYYY-MM-DDTHH:MM:SS[.fraction](Z|+HH:MM|-HH:MM)
RFC3339 = re.compile(
    r"^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})$"
)
_aware_datetime = TypeAdapter(AwareDatetime)

_WHITESPACE = re.compile(r"[ \t\n\r]*")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid json literal {name}")


# NaN / Infinity are not JSON
_json_values = json.JSONDecoder(parse_constant=_reject_constant)

Span = Tuple[int, int]


def metadata_from_headers(headers: Headers) -> Dict[str, str]:
    """`metadata.<key>` headers -> {<key>: first value}. Header names are lower-case."""
    metadata: Dict[str, str] = {}
    for name, value in headers.items():
        name = name.lower()
        if not name.startswith(METADATA_HEADER_PREFIX):
            continue
        metadata.setdefault(name[len(METADATA_HEADER_PREFIX):], value)
    return metadata


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """RFC 3339 date-time with an offset; anything else gives None."""
    if not value:
        return None
    m = RFC3339.match(value)
    if m is None:
        return None
    stamp, fraction, offset = m.groups()
    if fraction:
        # microsecond resolution, extra digits are truncated
        stamp += "." + fraction[:6].ljust(6, "0")
    try:
        return _aware_datetime.validate_python(stamp + offset)
    except ValidationError:
        return None


def split_members(text: str) -> Tuple[Dict[str, Any], Dict[str, Span]]:
    """
    Parse a top-level JSON object, also returning where each member's value
    sits in `text`. Duplicate names: the last one wins, as in json.loads.
    Raises ValueError for anything that is not exactly one JSON object.
    """
    idx = _WHITESPACE.match(text, 0).end()
    if text[idx:idx + 1] != "{":
        raise ValueError("not a json object")
    idx = _WHITESPACE.match(text, idx + 1).end()

    members: Dict[str, Any] = {}
    spans: Dict[str, Span] = {}
    if text[idx:idx + 1] == "}":
        idx += 1
    else:
        while True:
            if text[idx:idx + 1] != '"':
                raise ValueError(f"expected member name at offset {idx}")
            name, idx = scanstring(text, idx + 1)
            idx = _WHITESPACE.match(text, idx).end()
            if text[idx:idx + 1] != ":":
                raise ValueError(f"expected ':' at offset {idx}")
            start = _WHITESPACE.match(text, idx + 1).end()
            value, end = _json_values.raw_decode(text, start)
            members[name] = value
            spans[name] = (start, end)

            idx = _WHITESPACE.match(text, end).end()
            sep = text[idx:idx + 1]
            if sep == ",":
                idx = _WHITESPACE.match(text, idx + 1).end()
                continue
            if sep == "}":
                idx += 1
                break
            raise ValueError(f"expected ',' or '}}' at offset {idx}")

    if _WHITESPACE.match(text, idx).end() != len(text):
        raise ValueError(f"extra data at offset {idx}")
    return members, spans


def decode(subscription: Subscription, body: bytes, headers: Mapping[str, str]) -> Message:
    if not isinstance(headers, Headers):
        headers = Headers(headers=dict(headers))

    def fail(reason: str) -> EnvelopeDecodeError:
        return EnvelopeDecodeError(subscription.source_name, subscription.topic, reason)

    msg = Message(
        source_name=subscription.source_name,
        topic=subscription.topic,
        data=body,
        metadata=metadata_from_headers(headers),
    )
    if subscription.options.skip_envelope:
        return msg

    content_type = headers.get("content-type", "")
    if content_type != CLOUD_EVENT_CONTENT_TYPE:
        raise fail(f"Message does not have a cloud-event content-type: {content_type}")

    try:
        text = body.decode("utf-8")
        raw, spans = split_members(text)
    except ValueError as e:  # UnicodeDecodeError and json.JSONDecodeError included
        raise fail(f"Failed to unmarshal cloud-event json: {e}") from e

    try:
        event = CloudEvent.model_validate(raw)
    except ValidationError as e:
        errors = "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors())
        raise fail(f"Invalid cloud-event: {errors}") from e

    if event.specversion != CLOUD_EVENT_SPEC_VERSION:
        raise fail(f"Unknown cloud-event spec version '{event.specversion}'.")

    if event.pubsubname != subscription.source_name or event.topic != subscription.topic:
        raise fail(
            f"Message arrived at wrong destination ({subscription.source_name}/{subscription.topic}) "
            f"instead of ({event.pubsubname}/{event.topic})."
        )

    msg.id = event.id
    msg.content_type = event.datacontenttype or ""

    if is_json_content_type(msg.content_type):
        if "data" not in spans:
            raise fail("Cloud-event data does not match content type.")
        start, end = spans["data"]
        msg.data = text[start:end].encode("utf-8")
    elif event.data_base64 is not None:
        try:
            msg.data = base64.b64decode(event.data_base64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise fail("Failed to decode cloud-event base64 data.") from e
    else:
        raise fail("Cloud-event data does not match content type.")

    msg.fields = MessageFields(
        origin=event.source,
        kind=event.type,
        schema=event.dataschema or "",
        subject=event.subject or "",
        timestamp=parse_timestamp(event.time),
    )
    msg.trace = MessageTrace(
        id=event.traceid or "",
        parent=event.traceparent or "",
        state=event.tracestate or "",
    )
    return msg
