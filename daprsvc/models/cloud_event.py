from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

CLOUD_EVENT_CONTENT_TYPE = "application/cloudevents+json"
CLOUD_EVENT_SPEC_VERSION = "1.0"


class CloudEvent(BaseModel):
    """
    Structured CloudEvents 1.0 envelope as delivered by the Dapr sidecar.

    `pubsubname`, `topic` and the trace fields are Dapr extension attributes.
    Unknown attributes are ignored.
    """
    model_config = ConfigDict(extra="ignore")

    id: str
    source: str
    specversion: str
    type: str

    datacontenttype: Optional[str] = None
    dataschema: Optional[str] = None
    subject: Optional[str] = None
    time: Optional[str] = None
    data: Any = None
    data_base64: Optional[str] = None

    # Dapr extensions
    pubsubname: str
    topic: str
    traceid: Optional[str] = None
    traceparent: Optional[str] = None
    tracestate: Optional[str] = None
