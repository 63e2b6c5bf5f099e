"""
MarkupChannelRegistry - in-process fan-out of markup events.

A registry keyed by channel id (the blueprint's job id) that owns a set
of output sinks. Sinks are removed explicitly on disconnect, or
automatically when they raise during delivery.
"""

import logging
import threading
from typing import Callable, Dict, Set, Any

logger = logging.getLogger(__name__)

Sink = Callable[[Dict[str, Any]], None]


class MarkupChannelRegistry:
    """
    Usage:
        registry = MarkupChannelRegistry()
        unsubscribe = registry.subscribe("job-7", on_event)
        registry.publish("job-7", {"type": "markup_saved", ...})
        unsubscribe()
    """

    def __init__(self):
        self._channels: Dict[str, Set[Sink]] = {}
        # Saves finish on worker threads
        self._lock = threading.Lock()

    def subscribe(self, channel_id: str, sink: Sink) -> Callable[[], None]:
        """Register sink on channel_id. Returns a callable that unsubscribes it."""
        with self._lock:
            self._channels.setdefault(channel_id, set()).add(sink)
        return lambda: self.unsubscribe(channel_id, sink)

    def unsubscribe(self, channel_id: str, sink: Sink):
        with self._lock:
            sinks = self._channels.get(channel_id)
            if sinks is None:
                return
            sinks.discard(sink)
            if not sinks:
                del self._channels[channel_id]

    def sink_count(self, channel_id: str) -> int:
        with self._lock:
            return len(self._channels.get(channel_id, ()))

    def publish(self, channel_id: str, event: Dict[str, Any]) -> int:
        """
        Deliver event to every sink on channel_id.

        Returns:
            Number of sinks that received the event
        """
        with self._lock:
            sinks = list(self._channels.get(channel_id, ()))

        delivered = 0
        for sink in sinks:
            try:
                sink(event)
                delivered += 1
            except Exception as e:
                logger.warning(f"Dropping sink on channel {channel_id}: {e}")
                self.unsubscribe(channel_id, sink)
        return delivered


__all__ = ['MarkupChannelRegistry']
