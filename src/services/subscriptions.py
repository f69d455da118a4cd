"""
Observer registry for live user-data updates.

Callers register a callback for a topic and receive every snapshot published
to it until they call the returned unsubscribe function.

Typical usage:
    unsubscribe = registry.subscribe((user_id, "profile"), render_profile)
    ...
    unsubscribe()
"""
from typing import Any, Callable, Dict, Hashable, List

from aws_lambda_powertools import Logger

from src.utils.logging import SERVICE_NAME

logger = Logger(service=SERVICE_NAME)

Callback = Callable[[Any], None]
Unsubscribe = Callable[[], None]


class SubscriptionRegistry:
    """Topic-based registry delivering snapshots to callbacks."""

    def __init__(self):
        self._subscribers: Dict[Hashable, List[Callback]] = {}

    def subscribe(self, topic: Hashable, callback: Callback) -> Unsubscribe:
        """
        Register a callback for a topic.

        Args:
            topic: Key identifying the watched record
            callback: Called with each published snapshot

        Returns:
            Function removing this registration; calling it twice is a no-op
        """
        self._subscribers.setdefault(topic, []).append(callback)
        active = True

        def unsubscribe() -> None:
            nonlocal active
            if not active:
                return
            active = False
            callbacks = self._subscribers.get(topic, [])
            if callback in callbacks:
                callbacks.remove(callback)
            if not callbacks:
                self._subscribers.pop(topic, None)

        return unsubscribe

    def publish(self, topic: Hashable, snapshot: Any) -> int:
        """
        Deliver a snapshot to every subscriber of a topic.

        A failing callback is logged and does not block the others.

        Returns:
            Number of callbacks notified
        """
        callbacks = list(self._subscribers.get(topic, []))
        for callback in callbacks:
            try:
                callback(snapshot)
            except Exception as e:
                logger.exception("Subscriber callback failed", extra={
                    "topic": str(topic),
                    "error": str(e),
                    "error_type": e.__class__.__name__
                })
        return len(callbacks)

    def subscriber_count(self, topic: Hashable) -> int:
        return len(self._subscribers.get(topic, []))
