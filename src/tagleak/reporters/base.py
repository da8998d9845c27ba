"""Base reporter protocol."""

from typing import Protocol, runtime_checkable

from tagleak.types import CacheableResponse, LeakSet


@runtime_checkable
class LeakReporter(Protocol):
    """Reacts to leaked tags found on a response.

    Reporters may rewrite the body but never the cache tags or the status.
    """

    def report(self, leaks: LeakSet, response: CacheableResponse) -> None:
        """Handle a non-empty set of leaked tags."""
        ...
