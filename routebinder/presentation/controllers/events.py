"""Events controller: per-user server-sent event stream and publishing."""

from typing import Any

from routebinder.infrastructure.events import EventPublisher
from routebinder.presentation.controllers.base import Controller
from routebinder.presentation.routing import (
    ControllerResult,
    HTTPMethod,
    RequestContext,
    RouteMetadata,
)


class EventsController(Controller):
    routes = [
        RouteMetadata(
            method=HTTPMethod.GET,
            path="/v1/events",
            handler="subscribe",
            server_sent_events=True,
            summary="Stream the current user's events",
        ),
        RouteMetadata(
            method=HTTPMethod.POST,
            path="/v1/events",
            handler="publish",
            summary="Publish an event to the current user's streams",
        ),
    ]

    def __init__(self, publisher: EventPublisher) -> None:
        self._publisher = publisher

    async def subscribe(self, ctx: RequestContext, body: dict[str, Any]) -> None:
        """Forward published events until the client disconnects."""
        user = ctx.current_user
        stream = ctx.events
        await stream.comment("connected")
        async for event in self._publisher.subscribe(user.id):
            await stream.send_event(event)

    async def publish(self, ctx: RequestContext, body: dict[str, Any]) -> ControllerResult:
        user = ctx.current_user
        name = body.get("name")
        if not isinstance(name, str) or not name:
            self.bad_request("Event name is required")

        event = self._publisher.publish(user.id, name, body.get("data"))
        return self.created(
            {
                "id": str(event.event_id),
                "subscribers": self._publisher.subscriber_count(user.id),
            }
        )
