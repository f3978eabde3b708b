"""Unit tests for the events controller streaming handler.

The handler is driven directly against an EventStream, as the dispatcher
does for server-sent event routes.
"""

import asyncio
import json
from unittest.mock import MagicMock

import pytest
from uuid_extensions import uuid7

from routebinder.domain.entities import User
from routebinder.infrastructure.events import EventPublisher
from routebinder.presentation.controllers import EventsController
from routebinder.presentation.routing import EventStream, RequestContext


@pytest.mark.unit
class TestEventsSubscribe:
    """Test GET /v1/events handler."""

    async def test_streams_published_events_until_cancelled(self):
        publisher = EventPublisher()
        controller = EventsController(publisher=publisher)
        user = User(id=uuid7(), username="alice", password_hash="hash")
        stream = EventStream()
        context = RequestContext(request=MagicMock(), response=stream, user=user)

        task = asyncio.create_task(controller.subscribe(context, {}))
        stream.attach(task)
        frames = stream.frames()

        assert await anext(frames) == ": connected\n\n"
        while publisher.subscriber_count(user.id) == 0:
            await asyncio.sleep(0)
        publisher.publish(user.id, "device.provisioned", {"id": "core-1"})
        frame = await asyncio.wait_for(anext(frames), timeout=1)

        assert "event: device.provisioned" in frame
        assert json.loads(frame.split("data: ", 1)[1]) == {"id": "core-1"}

        # Client disconnect
        await frames.aclose()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert publisher.subscriber_count(user.id) == 0
