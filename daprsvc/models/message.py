from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

# "application/json", "application/cloudevents+json", "text/json", ...
JSON_CONTENT_TYPE = re.compile(r"^[^/]+/([^/]+\+)?json$")


def is_json_content_type(content_type: str) -> bool:
    # An empty content type is treated as JSON
    return content_type == "" or JSON_CONTENT_TYPE.match(content_type) is not None


@dataclass
class MessageFields:
    """CloudEvent attributes carried next to the payload."""
    origin: str = ""                      # cloud-event "source"
    kind: str = ""                        # cloud-event "type"
    schema: str = ""                      # cloud-event "dataschema"
    subject: str = ""
    timestamp: Optional[datetime] = None  # None when "time" is missing or unparseable


@dataclass
class MessageTrace:
    id: str = ""
    parent: str = ""
    state: str = ""


@dataclass
class Message:
    source_name: str
    topic: str
    data: bytes
    id: str = ""
    content_type: str = ""
    metadata: Dict[str, str] = field(default_factory=dict)
    fields: MessageFields = field(default_factory=MessageFields)
    trace: MessageTrace = field(default_factory=MessageTrace)

    def contains_json_data(self) -> bool:
        return is_json_content_type(self.content_type)

    def json(self) -> Any:
        """Parse `data` as JSON. Raises ValueError for non-json content types or invalid JSON."""
        if not self.contains_json_data():
            raise ValueError(f"Message has non-json content-type '{self.content_type}'.")
        # stdlib json keeps big integers exact
        return json.loads(self.data)  # json.JSONDecodeError is a ValueError
