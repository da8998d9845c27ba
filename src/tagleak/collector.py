"""Per-request collection of cache tags from loaded records."""

import logging
import threading
from collections.abc import Callable, Hashable, Iterable

from tagleak.types import CollectedTagSet, Tag, TrackableRecord, TrackedRecordRef

logger = logging.getLogger(__name__)

SkipTracking = Callable[[TrackableRecord], bool]


class TagCollector:
    """Accumulates the cache tags of every tracked record in one request.

    A collector belongs to exactly one request. Create a fresh one when the
    request starts and drop it once the response has been reconciled.
    """

    def __init__(self) -> None:
        self._entries: dict[Tag, TrackedRecordRef] = {}
        self._seen: set[tuple[str, Hashable]] = set()
        self._lock = threading.Lock()

    def track(self, record: TrackableRecord, trackable: bool = True) -> None:
        """Record the cache tags of a loaded record.

        Tags already collected keep their original attribution. A record
        that was tracked before is ignored, even if its tags changed since.
        """
        if not trackable:
            return

        ref = TrackedRecordRef.from_record(record)
        with self._lock:
            if ref.identity in self._seen:
                return
            self._seen.add(ref.identity)
            for tag in ref.tags:
                self._entries.setdefault(tag, ref)

    def snapshot(self) -> CollectedTagSet:
        """Return an immutable copy of everything collected so far."""
        with self._lock:
            return CollectedTagSet(self._entries.items())

    @property
    def tracked_records(self) -> int:
        """Number of distinct records tracked."""
        return len(self._seen)

    def __len__(self) -> int:
        return len(self._entries)


class RecordLoadAdapter:
    """Host-facing entry point notified whenever a record is loaded.

    ``skip_tracking`` predicates are consulted in order and any one of them
    returning True vetoes tracking for that record.
    """

    def __init__(
        self,
        collector: TagCollector,
        *,
        skip_tracking: Iterable[SkipTracking] = (),
        is_trackable_kind: Callable[[TrackableRecord], bool] | None = None,
    ) -> None:
        self._collector = collector
        self._skip_tracking = list(skip_tracking)
        self._is_trackable_kind = is_trackable_kind

    def add_skip_tracking(self, predicate: SkipTracking) -> None:
        """Register one more veto predicate."""
        self._skip_tracking.append(predicate)

    def should_track(self, record: TrackableRecord) -> bool:
        if self._is_trackable_kind is not None and not self._is_trackable_kind(
            record
        ):
            return False
        return not any(skip(record) for skip in self._skip_tracking)

    def on_record_loaded(self, record: TrackableRecord) -> None:
        """Forward a record load to the collector."""
        trackable = self.should_track(record)
        if not trackable:
            logger.debug(
                "Skipping tag tracking for %s:%s",
                record.record_type,
                record.record_id,
            )
        self._collector.track(record, trackable)

    def on_records_loaded(self, records: Iterable[TrackableRecord]) -> None:
        """Forward a batch load (e.g. a multiple-load call) to the collector."""
        for record in records:
            self.on_record_loaded(record)
