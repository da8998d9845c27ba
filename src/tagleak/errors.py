"""Exceptions raised by tagleak."""


class TagLeakError(Exception):
    """Base class for tagleak errors."""


class LeakDetected(TagLeakError):
    """A cacheable response is missing the cache tags of records it used."""

    def __init__(self, tags: tuple[str, ...]) -> None:
        self.tags = tags
        super().__init__(
            "The following cache tags were not applied to the page: "
            + ", ".join(tags)
        )


class SettingsError(TagLeakError):
    """Configuration values could not be validated."""


class NoActiveRequestError(TagLeakError):
    """No tag collector is bound to the current context."""
