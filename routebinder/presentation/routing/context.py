"""Per-request handler context and the server-sent events sink.

Controllers are shared and stateless; everything request-scoped reaches a
handler through the RequestContext passed as its first argument. A new
context is built for every request, so concurrent requests never share
request, response sink or user.
"""

import asyncio
import json
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any

from starlette.datastructures import UploadFile
from starlette.requests import Request
from starlette.responses import Response

from routebinder.core.constants import SSE_HEADERS
from routebinder.core.errors import HttpError
from routebinder.domain.entities import User
from routebinder.domain.events import ServerSentEvent


class EventStream:
    """Outbound sink for a server-sent events response.

    Frames are queued by the handler and drained by the StreamingResponse.
    Closing the stream ends the response; when the client goes away the
    handler task attached to the stream is cancelled.
    """

    def __init__(self) -> None:
        self.status_code = 200
        self.headers: dict[str, str] = dict(SSE_HEADERS)
        self._queue: asyncio.Queue[str | None] = asyncio.Queue()
        self._task: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def attach(self, task: "asyncio.Task[None]") -> None:
        """Tie the producing handler task to the stream's lifetime."""
        self._task = task

    async def send(
        self, data: Any, *, event: str | None = None, event_id: str | None = None
    ) -> None:
        """Queue one event frame; dropped when the stream is closed."""
        lines = []
        if event_id is not None:
            lines.append(f"id: {event_id}")
        if event is not None:
            lines.append(f"event: {event}")
        payload = data if isinstance(data, str) else json.dumps(data, default=str)
        lines.extend(f"data: {line}" for line in payload.splitlines() or [""])
        self._put("\n".join(lines) + "\n\n")

    async def send_event(self, event: ServerSentEvent) -> None:
        self._put(event.to_sse_format())

    async def comment(self, text: str) -> None:
        """Queue a comment frame (ignored by clients, keeps proxies awake)."""
        self._put(f": {text}\n\n")

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(None)

    async def frames(self) -> AsyncIterator[str]:
        """Yield queued frames until the stream is closed."""
        try:
            while True:
                frame = await self._queue.get()
                if frame is None:
                    return
                yield frame
        finally:
            self._closed = True
            if self._task is not None and not self._task.done():
                self._task.cancel()

    def _put(self, frame: str) -> None:
        if not self._closed:
            self._queue.put_nowait(frame)


@dataclass
class RequestContext:
    """Request-scoped state handed to a controller method.

    Attributes:
        request: Inbound request.
        response: Outbound sink; the framework's temporal Response (headers
            and cookies set on it are copied onto the JSON response) or an
            EventStream for server-sent event routes.
        user: Authenticated user, None on anonymous routes. Routes that are
            not anonymous always carry one; read it via current_user.
        files: Uploaded files by field name.
    """

    request: Request
    response: Response | EventStream
    user: User | None = None
    files: dict[str, list[UploadFile]] = field(default_factory=dict)

    @property
    def events(self) -> EventStream:
        """The event stream of a server-sent events route.

        Raises:
            RuntimeError: If the route does not stream events.
        """
        if not isinstance(self.response, EventStream):
            raise RuntimeError("Route is not bound with server_sent_events=True")
        return self.response

    @property
    def current_user(self) -> User:
        """The authenticated user.

        Raises:
            HttpError: 401 when the request carries no user (anonymous route).
        """
        if self.user is None:
            raise HttpError("Authentication required", status=HTTPStatus.UNAUTHORIZED)
        return self.user
