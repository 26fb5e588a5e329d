"""Base class for objects that publish messages to subscribers."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .registry import EventRegistry, PublishResult, Subscriber, Subscription


class Observable:
    """Owns a private ``EventRegistry`` and publishes with itself as source.

    Instantiate it directly or subclass it::

        class Download(Observable):
            def __init__(self) -> None:
                super().__init__(message_types=("progress", "done"))

            def advance(self, percent: int) -> None:
                self.publish("progress", percent)
    """

    def __init__(
        self,
        message_types: Iterable[str] = (),
        registry: EventRegistry | None = None,
    ) -> None:
        self.events = registry if registry is not None else EventRegistry()
        for message_type in message_types:
            self.events.add_type(message_type)

    def add_type(self, message_type: str) -> None:
        self.events.add_type(message_type)

    def remove_type(self, message_type: str) -> None:
        self.events.remove_type(message_type)

    def has_type(self, message_type: str) -> bool:
        return self.events.has_type(message_type)

    def message_types(self) -> list[str]:
        return self.events.message_types()

    def subscribers(self, message_type: str) -> tuple[Subscription, ...]:
        return self.events.subscribers(message_type)

    def subscriber_count(self, message_type: str) -> int:
        return self.events.subscriber_count(message_type)

    def subscribe(
        self, message_type: str, callback: Subscriber, *, key: str | None = None
    ) -> Subscription | None:
        return self.events.subscribe(message_type, callback, key=key)

    def unsubscribe(
        self, message_type: str, callback: Subscriber | Subscription
    ) -> bool:
        return self.events.unsubscribe(message_type, callback)

    def publish(self, message_type: str, data: Any = None) -> PublishResult | None:
        """Broadcast ``data`` to subscribers of ``message_type`` from ``self``."""
        return self.events.publish(message_type, data, source=self)
