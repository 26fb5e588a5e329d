"""Tests for domain exception hierarchy."""

from __future__ import annotations

import unittest

from eventregistry.exceptions import (
    ConfigValidationError,
    DuplicateSubscriptionKeyError,
    EventRegistryError,
    InvalidSubscriberError,
)


class ExceptionHierarchyTests(unittest.TestCase):
    """Validate exception inheritance contract."""

    def test_exception_hierarchy(self) -> None:
        self.assertTrue(issubclass(InvalidSubscriberError, EventRegistryError))
        self.assertTrue(issubclass(DuplicateSubscriptionKeyError, EventRegistryError))
        self.assertTrue(issubclass(ConfigValidationError, EventRegistryError))
        self.assertTrue(issubclass(EventRegistryError, RuntimeError))

    def test_builtin_bases_for_caller_compatibility(self) -> None:
        self.assertTrue(issubclass(InvalidSubscriberError, TypeError))
        self.assertTrue(issubclass(DuplicateSubscriptionKeyError, ValueError))


if __name__ == "__main__":
    unittest.main()
