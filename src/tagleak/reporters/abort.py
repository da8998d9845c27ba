"""Reporter that fails the request."""

from tagleak.errors import LeakDetected
from tagleak.types import CacheableResponse, LeakSet


class AbortReporter:
    """Raises LeakDetected so the host turns the request into an error."""

    def report(self, leaks: LeakSet, response: CacheableResponse) -> None:
        raise LeakDetected(tuple(leaks))
