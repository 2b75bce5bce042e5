"""Synchronous in-process bus for catalog domain events."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable


class EventBus:
    """Publish/subscribe bus keyed by the published object's type.

    Subscribers run synchronously, in the order they subscribed, before
    ``publish`` returns.
    """

    def __init__(self) -> None:
        self._subscribers: dict[type, list[Callable[[Any], None]]] = defaultdict(list)

    def subscribe(self, message_type: type, handler: Callable[[Any], None]) -> None:
        self._subscribers[message_type].append(handler)

    def publish(self, message: Any) -> None:
        for handler in list(self._subscribers.get(type(message), [])):
            handler(message)
