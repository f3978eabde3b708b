"""Server-sent event value object and its wire format."""

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from uuid_extensions import uuid7


@dataclass(frozen=True, slots=True, kw_only=True)
class ServerSentEvent:
    """One event frame.

    Attributes:
        event: Event name (the SSE ``event:`` field).
        data: JSON-serializable payload.
        event_id: Unique id (the SSE ``id:`` field), used for Last-Event-ID.
        occurred_at: Publication timestamp.
    """

    event: str
    data: Any
    event_id: UUID = field(default_factory=uuid7)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_sse_format(self) -> str:
        """Serialize to SSE wire format.

        Example output:
            id: 01234567-89ab-cdef-0123-456789abcdef
            event: device.provisioned
            data: {"id": "abc"}

        The frame ends with a blank line; data is JSON on a single line.
        """
        lines = [
            f"id: {self.event_id}",
            f"event: {self.event}",
            f"data: {json.dumps(self.data, default=str)}",
            "",
        ]
        return "\n".join(lines) + "\n"
