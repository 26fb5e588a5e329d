"""Top-level package for eventregistry."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .config import load_config
    from .exceptions import (
        ConfigValidationError,
        DuplicateSubscriptionKeyError,
        EventRegistryError,
        InvalidSubscriberError,
    )
    from .logging_utils import configure_logging
    from .observable import Observable
    from .registry import EventRegistry, PublishResult, Subscription

__all__ = [
    "ConfigValidationError",
    "DuplicateSubscriptionKeyError",
    "EventRegistry",
    "EventRegistryError",
    "InvalidSubscriberError",
    "Observable",
    "PublishResult",
    "Subscription",
    "configure_logging",
    "load_config",
]


def __getattr__(name: str) -> Any:
    """Lazily import symbols so pydantic and structlog load only when used."""
    if name in {"EventRegistry", "PublishResult", "Subscription"}:
        from . import registry

        return getattr(registry, name)
    if name == "Observable":
        from .observable import Observable

        return Observable
    if name in {
        "ConfigValidationError",
        "DuplicateSubscriptionKeyError",
        "EventRegistryError",
        "InvalidSubscriberError",
    }:
        from . import exceptions

        return getattr(exceptions, name)
    if name == "load_config":
        from .config import load_config

        return load_config
    if name == "configure_logging":
        from .logging_utils import configure_logging

        return configure_logging
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
