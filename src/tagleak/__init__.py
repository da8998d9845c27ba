"""tagleak - Detect cache tag leaks in cacheable responses."""

from contextlib import suppress

# Listing catalogs
from tagleak.catalog import ListingCatalogSource, StaticListingCatalog

# Collection
from tagleak.collector import RecordLoadAdapter, TagCollector

# Errors
from tagleak.errors import (
    LeakDetected,
    NoActiveRequestError,
    SettingsError,
    TagLeakError,
)

# Reconciliation
from tagleak.policy import ReconciliationPolicy, create_policy

# Reporters
from tagleak.reporters import (
    AbortReporter,
    AnnotateReporter,
    LeakReporter,
    SilentReporter,
    create_reporter,
)
from tagleak.scope import current_collector, request_scope

# Configuration
from tagleak.settings import LeakSettings, OperationMode, parse_skip_urls
from tagleak.suppression import covered_record_types, suppress_listed

# Core types
from tagleak.types import (
    CacheableResponse,
    CollectedTagSet,
    LeakSet,
    ListingCatalog,
    RequestContext,
    Tag,
    TrackableRecord,
    TrackedRecordRef,
)

# Optional integrations - only available when dependencies are installed
with suppress(ImportError):
    from tagleak.integrations import TagLeakMiddleware

__version__ = "0.1.0"

__all__ = [
    "AbortReporter",
    "AnnotateReporter",
    "CacheableResponse",
    "CollectedTagSet",
    "LeakDetected",
    "LeakReporter",
    "LeakSet",
    "LeakSettings",
    "ListingCatalog",
    "ListingCatalogSource",
    "NoActiveRequestError",
    "OperationMode",
    "ReconciliationPolicy",
    "RecordLoadAdapter",
    "RequestContext",
    "SettingsError",
    "SilentReporter",
    "StaticListingCatalog",
    "Tag",
    "TagCollector",
    "TagLeakError",
    "TagLeakMiddleware",
    "TrackableRecord",
    "TrackedRecordRef",
    "covered_record_types",
    "create_policy",
    "create_reporter",
    "current_collector",
    "parse_skip_urls",
    "request_scope",
    "suppress_listed",
]
