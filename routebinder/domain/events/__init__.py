"""Domain events streamed to clients."""

from routebinder.domain.events.server_sent_event import ServerSentEvent

__all__ = ["ServerSentEvent"]
