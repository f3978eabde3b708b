"""In-process event publishing for server-sent event streams."""

from routebinder.infrastructure.events.publisher import EventPublisher

__all__ = ["EventPublisher"]
