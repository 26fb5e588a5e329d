"""Typed event registry with synchronous broadcast-and-collect.

Usage:
    registry = EventRegistry()
    registry.add_type("generic")

    def on_generic(data, message_type, source, results_so_far):
        return f"got {data}"

    registry.subscribe("generic", on_generic, key="printer")
    result = registry.publish("generic", "hello", source=owner)
    # result == {"printer": "got hello"}

Missing message types and callbacks never raise: removals degrade to no-ops
and ``publish`` returns ``None`` when nobody responded.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
import inspect
import itertools
import logging
import threading
from types import MappingProxyType
from typing import Any

from .exceptions import DuplicateSubscriptionKeyError, InvalidSubscriberError

LOGGER = logging.getLogger(__name__)

Subscriber = Callable[[Any, str, Any, Mapping[str, Any]], Any]


@dataclass(frozen=True, eq=False)
class Subscription:
    """One entry in a channel's subscriber list."""

    message_type: str
    callback: Subscriber
    key: str


class PublishResult(Mapping[str, Any]):
    """Read-only mapping of subscription key to subscriber return value.

    Entries are ordered by invocation, which is subscription order.
    """

    def __init__(
        self,
        message_type: str,
        values: dict[str, Any],
        subscriptions: dict[str, Subscription],
    ) -> None:
        self.message_type = message_type
        self._values = dict(values)
        self._subscriptions = dict(subscriptions)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"PublishResult({self.message_type!r}, {self._values!r})"

    def for_callback(self, callback: Subscriber) -> list[Any]:
        """Return every value produced by ``callback``, once per subscription."""
        return [
            self._values[key]
            for key, sub in self._subscriptions.items()
            if _same_callback(sub.callback, callback)
        ]

    def subscription(self, key: str) -> Subscription:
        return self._subscriptions[key]


def _same_callback(candidate: Callable[..., Any], callback: Callable[..., Any]) -> bool:
    # Bound methods are rebuilt on every attribute access.
    if candidate is callback:
        return True
    if inspect.ismethod(candidate) and inspect.ismethod(callback):
        return (
            candidate.__self__ is callback.__self__
            and candidate.__func__ is callback.__func__
        )
    return False


def _is_hashable(value: object) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


def _log_invalid_type(event: str, message_type: object) -> None:
    LOGGER.warning(
        event,
        extra={"event": event, "message_type": repr(message_type)},
    )


def _callback_name(callback: Callable[..., Any]) -> str:
    name = getattr(callback, "__qualname__", None) or getattr(callback, "__name__", None)
    if not isinstance(name, str) or not name:
        name = type(callback).__name__
    return name


class EventRegistry:
    """Mapping of message type to an ordered list of subscribers.

    Each instance owns its own mapping. Subscribers run inline, in
    registration order, on the caller's stack. Mutations are guarded by a
    reentrant lock and ``publish`` iterates over a snapshot, so subscribers
    may subscribe or unsubscribe while a publish is in flight without
    affecting the current broadcast.

    Args:
        auto_create_types: When true, ``subscribe`` on an unknown message
            type registers it. When false, that call is a logged no-op.
        isolate_subscriber_errors: When true, an exception raised by a
            subscriber is logged and that subscriber contributes no result.
            When false the exception propagates out of ``publish``.
    """

    def __init__(
        self,
        *,
        auto_create_types: bool = True,
        isolate_subscriber_errors: bool = False,
    ) -> None:
        self.auto_create_types = auto_create_types
        self.isolate_subscriber_errors = isolate_subscriber_errors
        self._subscribers: dict[str, list[Subscription]] = {}
        self._sequence = itertools.count(1)
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> EventRegistry:
        """Build a registry from a mapping returned by ``load_config``."""
        section = config.get("registry", {}) or {}
        return cls(
            auto_create_types=bool(section.get("auto_create_types", True)),
            isolate_subscriber_errors=bool(
                section.get("isolate_subscriber_errors", False)
            ),
        )

    def __contains__(self, message_type: object) -> bool:
        return self.has_type(message_type)

    def __len__(self) -> int:
        return len(self._subscribers)

    def __repr__(self) -> str:
        return f"EventRegistry(types={self.message_types()!r})"

    def add_type(self, message_type: str) -> None:
        """Register ``message_type`` with an empty subscriber list.

        Re-adding an existing type resets it and drops its subscribers.
        """
        if not _is_hashable(message_type):
            _log_invalid_type("registry.type.invalid", message_type)
            return
        with self._lock:
            dropped = len(self._subscribers.get(message_type, ()))
            self._subscribers[message_type] = []
        LOGGER.debug(
            "registry.type.added",
            extra={
                "event": "registry.type.added",
                "message_type": message_type,
                "dropped_subscribers": dropped,
            },
        )

    def remove_type(self, message_type: str) -> None:
        with self._lock:
            removed = self._channel(message_type)
            if removed is not None:
                del self._subscribers[message_type]
        if removed is not None:
            LOGGER.debug(
                "registry.type.removed",
                extra={"event": "registry.type.removed", "message_type": message_type},
            )

    def has_type(self, message_type: object) -> bool:
        return self._channel(message_type) is not None

    def _channel(self, message_type: object) -> list[Subscription] | None:
        # Unhashable input can never be a registered type.
        if not _is_hashable(message_type):
            return None
        return self._subscribers.get(message_type)

    def message_types(self) -> list[str]:
        with self._lock:
            return list(self._subscribers)

    def subscribers(self, message_type: str) -> tuple[Subscription, ...]:
        with self._lock:
            return tuple(self._channel(message_type) or ())

    def subscriber_count(self, message_type: str) -> int:
        with self._lock:
            return len(self._channel(message_type) or ())

    def clear(self) -> None:
        with self._lock:
            self._subscribers.clear()

    def subscribe(
        self,
        message_type: str,
        callback: Subscriber,
        *,
        key: str | None = None,
    ) -> Subscription | None:
        """Append ``callback`` to the subscribers of ``message_type``.

        The same callback may be subscribed several times; it is then invoked
        once per subscription. ``key`` names this subscription's entry in
        publish results and defaults to ``"<callback name>#<n>"``.

        Returns:
            The new subscription, or ``None`` when the type is unknown and
            ``auto_create_types`` is disabled, or when
            ``message_type`` is unhashable.

        Raises:
            InvalidSubscriberError: ``callback`` is not callable.
            DuplicateSubscriptionKeyError: ``key`` is already used on this
                message type.
        """
        if not callable(callback):
            raise InvalidSubscriberError(
                f"Subscriber for {message_type!r} must be callable, "
                f"got {type(callback).__name__}."
            )

        if not _is_hashable(message_type):
            _log_invalid_type("registry.subscribe.invalid_type", message_type)
            return None

        with self._lock:
            channel = self._channel(message_type)
            if channel is None:
                if not self.auto_create_types:
                    LOGGER.warning(
                        "registry.subscribe.unknown_type",
                        extra={
                            "event": "registry.subscribe.unknown_type",
                            "message_type": message_type,
                        },
                    )
                    return None
                channel = self._subscribers[message_type] = []

            used_keys = {sub.key for sub in channel}
            if key is None:
                name = _callback_name(callback)
                key = f"{name}#{next(self._sequence)}"
                while key in used_keys:
                    key = f"{name}#{next(self._sequence)}"
            elif key in used_keys:
                raise DuplicateSubscriptionKeyError(
                    f"Key {key!r} is already subscribed to {message_type!r}."
                )

            subscription = Subscription(message_type, callback, key)
            channel.append(subscription)

        LOGGER.debug(
            "registry.subscribed",
            extra={
                "event": "registry.subscribed",
                "message_type": message_type,
                "key": key,
            },
        )
        return subscription

    def unsubscribe(
        self, message_type: str, callback: Subscriber | Subscription
    ) -> bool:
        """Remove the first subscription of ``callback`` from ``message_type``.

        Passing a ``Subscription`` removes exactly that entry. Returns whether
        anything was removed.
        """
        with self._lock:
            channel = self._channel(message_type)
            if not channel:
                return False
            for index, sub in enumerate(channel):
                if isinstance(callback, Subscription):
                    matched = sub is callback
                else:
                    matched = _same_callback(sub.callback, callback)
                if matched:
                    del channel[index]
                    break
            else:
                return False

        LOGGER.debug(
            "registry.unsubscribed",
            extra={
                "event": "registry.unsubscribed",
                "message_type": message_type,
                "key": sub.key,
            },
        )
        return True

    def publish(
        self, message_type: str, data: Any = None, source: Any = None
    ) -> PublishResult | None:
        """Invoke every subscriber of ``message_type`` and collect the results.

        Each subscriber receives ``(data, message_type, source,
        results_so_far)``; ``results_so_far`` is a read-only view of the
        values returned by earlier subscribers in this broadcast.

        Returns:
            ``None`` when the type is unknown or nobody responded, otherwise
            a ``PublishResult`` keyed by subscription key.
        """
        with self._lock:
            channel = self._channel(message_type)
            snapshot = tuple(channel) if channel else ()

        if not snapshot:
            LOGGER.debug(
                "registry.publish.no_subscribers",
                extra={
                    "event": "registry.publish.no_subscribers",
                    "message_type": message_type,
                },
            )
            return None

        values: dict[str, Any] = {}
        responders: dict[str, Subscription] = {}
        results_so_far = MappingProxyType(values)
        for sub in snapshot:
            try:
                value = sub.callback(data, message_type, source, results_so_far)
            except Exception:
                if not self.isolate_subscriber_errors:
                    raise
                LOGGER.exception(
                    "registry.subscriber.failed",
                    extra={
                        "event": "registry.subscriber.failed",
                        "message_type": message_type,
                        "key": sub.key,
                    },
                )
                continue
            values[sub.key] = value
            responders[sub.key] = sub

        LOGGER.debug(
            "registry.published",
            extra={
                "event": "registry.published",
                "message_type": message_type,
                "subscribers": len(snapshot),
                "responses": len(values),
            },
        )
        if not values:
            return None
        return PublishResult(message_type, values, responders)
