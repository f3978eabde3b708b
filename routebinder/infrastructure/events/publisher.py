"""In-memory event publisher.

Fan-out of ServerSentEvents to every open subscription of a user. Each
subscription owns a bounded asyncio.Queue; when a slow subscriber's queue is
full the oldest event is dropped so publishers never block.
"""

import asyncio
from collections import defaultdict
from collections.abc import AsyncIterator
from typing import Any
from uuid import UUID

from routebinder.domain.events import ServerSentEvent

DEFAULT_QUEUE_SIZE = 100


class EventPublisher:
    """Publish events to per-user subscriptions."""

    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
        self._queue_size = queue_size
        self._subscribers: dict[UUID, set[asyncio.Queue[ServerSentEvent]]] = defaultdict(set)

    def subscriber_count(self, user_id: UUID) -> int:
        return len(self._subscribers.get(user_id, ()))

    def publish(self, user_id: UUID, event: str, data: Any) -> ServerSentEvent:
        """Deliver an event to every subscription of user_id.

        Returns:
            The published event.
        """
        message = ServerSentEvent(event=event, data=data)
        for queue in list(self._subscribers.get(user_id, ())):
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(message)
        return message

    async def subscribe(self, user_id: UUID) -> AsyncIterator[ServerSentEvent]:
        """Yield events published for user_id until the consumer stops."""
        queue: asyncio.Queue[ServerSentEvent] = asyncio.Queue(maxsize=self._queue_size)
        self._subscribers[user_id].add(queue)
        try:
            while True:
                yield await queue.get()
        finally:
            self._subscribers[user_id].discard(queue)
            if not self._subscribers[user_id]:
                del self._subscribers[user_id]
