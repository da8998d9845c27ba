"""Core types for tagleak."""

from collections.abc import Collection, Hashable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    NewType,
    Protocol,
    runtime_checkable,
)

# Branded tag type - compile-time enforcement only
if TYPE_CHECKING:
    Tag = NewType("Tag", str)
else:
    Tag = str

# Record type id -> listing tags that type defines
ListingCatalog = Mapping[str, Collection[Tag]]

# Leaked tags in collection order
LeakSet = tuple[Tag, ...]


@runtime_checkable
class TrackableRecord(Protocol):
    """A content record whose cache tags can be tracked."""

    record_type: str
    record_id: Hashable

    @property
    def cache_tags(self) -> Iterable[str]:
        """Invalidation tags the record declares."""
        ...


@runtime_checkable
class CacheableResponse(Protocol):
    """A response exposing cache metadata and a replaceable body."""

    def get_cache_tags(self) -> Iterable[str]:
        """Return the cache tags currently declared on the response."""
        ...

    def get_content(self) -> str | bytes:
        """Return the response body."""
        ...

    def set_content(self, content: str | bytes) -> None:
        """Replace the response body."""
        ...


@dataclass(frozen=True, slots=True)
class TrackedRecordRef:
    """The record a collected tag was attributed to."""

    record_type: str
    record_id: Hashable
    tags: tuple[Tag, ...]

    @classmethod
    def from_record(cls, record: TrackableRecord) -> "TrackedRecordRef":
        return cls(
            record_type=record.record_type,
            record_id=record.record_id,
            tags=tuple(Tag(tag) for tag in record.cache_tags),
        )

    @property
    def identity(self) -> tuple[str, Hashable]:
        return (self.record_type, self.record_id)


class CollectedTagSet(Mapping[Tag, TrackedRecordRef]):
    """Immutable, ordered mapping of collected tags to their first source."""

    __slots__ = ("_entries",)

    def __init__(
        self, entries: Iterable[tuple[Tag, TrackedRecordRef]] = ()
    ) -> None:
        collected: dict[Tag, TrackedRecordRef] = {}
        for tag, source in entries:
            collected.setdefault(tag, source)  # first writer wins
        self._entries = collected

    def __getitem__(self, tag: Tag) -> TrackedRecordRef:
        return self._entries[tag]

    def __iter__(self) -> Iterator[Tag]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"CollectedTagSet({list(self._entries)!r})"

    @property
    def tags(self) -> tuple[Tag, ...]:
        """Collected tags in insertion order."""
        return tuple(self._entries)

    def difference(self, tags: Collection[str]) -> LeakSet:
        """Collected tags absent from ``tags``, compared by exact value."""
        return tuple(tag for tag in self._entries if tag not in tags)


@dataclass(frozen=True, slots=True)
class RequestContext:
    """What the host knows about the request being answered."""

    path: str
    route_name: str | None = None
    is_admin_route: bool = False
    active_theme: str | None = None
    admin_theme: str | None = None
    is_subrequest: bool = False
    is_xhr: bool = False

    @property
    def uses_admin_theme(self) -> bool:
        if self.active_theme is None or self.admin_theme is None:
            return False
        return self.active_theme == self.admin_theme
