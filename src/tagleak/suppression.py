"""Suppression of record tags already covered by a listing tag.

When a response declares a listing tag for a record type ("any record of
this type may have changed"), missing individual record tags of that type
are not leaks. A listing tag covers a response tag by literal string prefix,
so bundle-qualified variants such as ``record_list:article`` still count as
covered by ``record_list``.
"""

from collections.abc import Collection

from tagleak.types import CollectedTagSet, ListingCatalog, Tag, TrackedRecordRef


def covered_record_types(
    response_tags: Collection[str], catalog: ListingCatalog
) -> frozenset[str]:
    """Record types with at least one listing tag present on the response."""
    pairs = {
        (record_type, listing_tag)
        for record_type, listing_tags in catalog.items()
        for listing_tag in listing_tags
    }
    return frozenset(
        record_type
        for record_type, listing_tag in pairs
        if any(tag.startswith(listing_tag) for tag in response_tags)
    )


def _record_type_of(
    tag: Tag, source: TrackedRecordRef, catalog: ListingCatalog
) -> str | None:
    """Record type a ``<type>:<id>`` tag belongs to, None for other tags.

    The tag's own prefix wins when it names a catalog type; otherwise the
    tag belongs to the record it was collected from.
    """
    prefix, sep, _ = tag.partition(":")
    if not sep:
        return None
    return prefix if prefix in catalog else source.record_type


def suppress_listed(
    collected: CollectedTagSet,
    response_tags: Collection[str],
    catalog: ListingCatalog,
) -> CollectedTagSet:
    """Drop collected entries whose record type is covered by the response.

    Only tags of the form ``<type>:<id>`` are eligible. Which record loaded
    a tag first never matters when the tag names a catalog type.
    """
    covered = covered_record_types(response_tags, catalog)
    if not covered:
        return collected

    return CollectedTagSet(
        (tag, source)
        for tag, source in collected.items()
        if _record_type_of(tag, source, catalog) not in covered
    )
