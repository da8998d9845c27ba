"""Reporter that ignores leaks."""

from tagleak.types import CacheableResponse, LeakSet


class SilentReporter:
    """Drops leaks without touching the response."""

    def report(self, leaks: LeakSet, response: CacheableResponse) -> None:
        pass
