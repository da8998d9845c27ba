"""Leak reporters, one per operation mode."""

from tagleak.reporters.abort import AbortReporter
from tagleak.reporters.annotate import AnnotateReporter
from tagleak.reporters.base import LeakReporter
from tagleak.reporters.silent import SilentReporter
from tagleak.settings import OperationMode

_REPORTERS: dict[OperationMode, type[LeakReporter]] = {
    OperationMode.DISABLED: SilentReporter,
    OperationMode.ERRORS: AnnotateReporter,
    OperationMode.STRICT: AbortReporter,
}


def create_reporter(mode: OperationMode | str) -> LeakReporter:
    """Create the reporter for an operation mode."""
    return _REPORTERS[OperationMode(mode)]()


__all__ = [
    "AbortReporter",
    "AnnotateReporter",
    "LeakReporter",
    "SilentReporter",
    "create_reporter",
]
