"""Domain exception hierarchy for the event registry."""

from __future__ import annotations


class EventRegistryError(RuntimeError):
    """Base class for all registry errors."""


class InvalidSubscriberError(EventRegistryError, TypeError):
    """Raised when a non-callable value is subscribed."""


class DuplicateSubscriptionKeyError(EventRegistryError, ValueError):
    """Raised when an explicit result key is already used on a channel."""


class ConfigValidationError(EventRegistryError):
    """Raised when configuration cannot be validated safely."""
