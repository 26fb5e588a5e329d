"""Tests for the Observable composition helper."""

from __future__ import annotations

from typing import Any
import unittest

from eventregistry.observable import Observable
from eventregistry.registry import EventRegistry


class Download(Observable):
    """Example subclass publishing its own progress."""

    def __init__(self) -> None:
        super().__init__(message_types=("progress",))

    def advance(self, percent: int) -> Any:
        return self.publish("progress", percent)


class ObservableTests(unittest.TestCase):
    """Validate delegation and per-instance registries."""

    def test_constructor_registers_message_types(self) -> None:
        observable = Observable(message_types=("a", "b"))
        self.assertTrue(observable.has_type("a"))
        self.assertTrue(observable.has_type("b"))
        self.assertEqual(observable.message_types(), ["a", "b"])

    def test_publish_passes_self_as_source(self) -> None:
        download = Download()
        sources: list[Any] = []

        def on_progress(data: Any, message_type: str, source: Any, results: Any) -> int:
            sources.append(source)
            return data * 2

        download.subscribe("progress", on_progress, key="double")
        result = download.advance(21)

        self.assertEqual(dict(result), {"double": 42})
        self.assertEqual(sources, [download])

    def test_instances_have_private_registries(self) -> None:
        first = Download()
        second = Download()
        first.subscribe("progress", lambda *args: "first")
        self.assertIsNone(second.advance(10))
        self.assertIsNot(first.events, second.events)

    def test_inspection_delegates_to_registry(self) -> None:
        observable = Observable(message_types=("generic",))
        subscription = observable.subscribe("generic", lambda *args: None, key="k")
        self.assertEqual(observable.subscribers("generic"), (subscription,))
        self.assertEqual(observable.subscriber_count("generic"), 1)
        self.assertEqual(observable.subscriber_count("missing"), 0)

    def test_injected_registry_is_used(self) -> None:
        registry = EventRegistry(auto_create_types=False)
        observable = Observable(registry=registry)
        self.assertIs(observable.events, registry)
        self.assertIsNone(observable.subscribe("unknown", lambda *args: None))

    def test_remove_type_and_unsubscribe_delegate(self) -> None:
        observable = Observable()

        def handler(data: Any, message_type: str, source: Any, results: Any) -> str:
            return "ok"

        observable.add_type("generic")
        observable.subscribe("generic", handler)
        self.assertTrue(observable.unsubscribe("generic", handler))
        self.assertIsNone(observable.publish("generic", "hello"))
        observable.remove_type("generic")
        self.assertFalse(observable.has_type("generic"))


if __name__ == "__main__":
    unittest.main()
