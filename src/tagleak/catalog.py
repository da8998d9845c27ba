"""Listing tag catalogs."""

from collections.abc import Collection, Mapping
from types import MappingProxyType
from typing import Protocol, runtime_checkable

from tagleak.types import ListingCatalog, Tag


@runtime_checkable
class ListingCatalogSource(Protocol):
    """Record-type registry that knows each type's listing tags."""

    def get_listing_tags(self) -> ListingCatalog:
        """Return record type -> listing tags."""
        ...


class StaticListingCatalog:
    """Read-only catalog for hosts whose record types never change."""

    def __init__(self, listing_tags: Mapping[str, Collection[str]] | None = None) -> None:
        self._catalog: ListingCatalog = MappingProxyType(
            {
                record_type: tuple(Tag(tag) for tag in tags)
                for record_type, tags in (listing_tags or {}).items()
            }
        )

    def get_listing_tags(self) -> ListingCatalog:
        return self._catalog

    def __repr__(self) -> str:
        return f"StaticListingCatalog({dict(self._catalog)!r})"
