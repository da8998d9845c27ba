"""Host integrations for tagleak."""

from contextlib import suppress

# Optional integrations - only available when dependencies are installed
with suppress(ImportError):
    from tagleak.integrations.starlette import TagLeakMiddleware

__all__ = ["TagLeakMiddleware"]
