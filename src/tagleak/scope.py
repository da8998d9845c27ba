"""Binding of a request's tag collector to the current context."""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from tagleak.collector import TagCollector
from tagleak.errors import NoActiveRequestError

_current: ContextVar[TagCollector | None] = ContextVar(
    "tagleak_collector", default=None
)


@contextmanager
def request_scope() -> Iterator[TagCollector]:
    """Bind a fresh collector for the duration of one request."""
    collector = TagCollector()
    token = _current.set(collector)
    try:
        yield collector
    finally:
        _current.reset(token)


def current_collector() -> TagCollector:
    """Return the collector bound to the current request."""
    collector = _current.get()
    if collector is None:
        raise NoActiveRequestError("No request scope is active")
    return collector
