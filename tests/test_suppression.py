"""Tests for listing tag suppression."""

import copy

from tagleak import (
    CollectedTagSet,
    TagCollector,
    TrackedRecordRef,
    covered_record_types,
    suppress_listed,
)

from .conftest import FakeRecord, article


def collected(*entries: tuple[str, str]) -> CollectedTagSet:
    """Build a collected set from (tag, record_type) pairs."""
    return CollectedTagSet(
        (tag, TrackedRecordRef(record_type, i, (tag,)))
        for i, (tag, record_type) in enumerate(entries)
    )


class TestCoveredRecordTypes:
    """Tests for covered_record_types."""

    def test_exact_listing_tag(self) -> None:
        """Test that a listing tag on the response covers its type."""
        assert covered_record_types({"article_list"}, {"article": ["article_list"]}) == {
            "article"
        }

    def test_prefix_match(self) -> None:
        """Test that bundle-qualified response tags count as covering."""
        catalog = {"article": ["record_list"]}
        assert covered_record_types({"record_list:article"}, catalog) == {"article"}

    def test_prefix_is_literal(self) -> None:
        """Test that the listing tag must be a literal prefix of a response tag."""
        catalog = {"article": ["record_list:article"]}
        assert covered_record_types({"record_list"}, catalog) == frozenset()

    def test_empty_catalog(self) -> None:
        """Test that nothing is covered without a catalog."""
        assert covered_record_types({"article_list"}, {}) == frozenset()


class TestSuppressListed:
    """Tests for suppress_listed."""

    def test_noop_with_empty_catalog(self) -> None:
        """Test that an empty catalog suppresses nothing."""
        tags = collected(("article:1", "article"), ("user:2", "user"))
        assert suppress_listed(tags, {"article_list"}, {}) == tags

    def test_noop_when_no_listing_tag_present(self) -> None:
        """Test that suppression needs a listing tag on the response."""
        tags = collected(("article:1", "article"))
        result = suppress_listed(tags, {"article:1"}, {"article": ["article_list"]})
        assert result.tags == ("article:1",)

    def test_removes_covered_type(self) -> None:
        """Test that record tags of a covered type are removed."""
        tags = collected(("article:1", "article"), ("user:2", "user"))
        result = suppress_listed(tags, {"article_list"}, {"article": ["article_list"]})
        assert result.tags == ("user:2",)

    def test_attributed_type_is_covered(self) -> None:
        """Test that the record a tag came from decides its type too."""
        tags = collected(("record_list:article", "article"))
        result = suppress_listed(tags, {"record_list"}, {"article": ["record_list"]})
        assert len(result) == 0

    def test_tags_without_type_kept(self) -> None:
        """Test that tags not shaped like <type>:<id> are never removed."""
        tags = collected(("article_sitewide", "article"), ("article:1", "article"))
        result = suppress_listed(tags, {"article_list"}, {"article": ["article_list"]})
        assert result.tags == ("article_sitewide",)

    def test_result_is_subset(self) -> None:
        """Test that suppression never adds tags."""
        tags = collected(("article:1", "article"), ("user:2", "user"), ("node:3", "node"))
        catalog = {"article": ["article_list"], "user": ["user_list"], "term": ["term_list"]}
        result = suppress_listed(tags, {"user_list", "term_list"}, catalog)
        assert set(result) <= set(tags)
        assert result.tags == ("article:1", "node:3")

    def test_prefix_type_beats_attribution(self) -> None:
        """Test that a tag naming a catalog type is judged by that type."""
        tags = collected(("article:1", "article"), ("user:7", "article"))
        catalog = {"article": ["article_list"], "user": ["user_list"]}
        result = suppress_listed(tags, {"article_list"}, catalog)
        assert result.tags == ("user:7",)

    def test_load_order_does_not_matter(self) -> None:
        """Test that the same records give the same result in any order."""
        records = [article(1, "user:7"), FakeRecord("user", 7, ["user:7"])]
        catalog = {"article": ["article_list"], "user": ["user_list"]}
        results = []
        for ordered in (records, records[::-1]):
            collector = TagCollector()
            for record in ordered:
                collector.track(record)
            result = suppress_listed(collector.snapshot(), {"article_list"}, catalog)
            results.append(set(result))
        assert results[0] == results[1] == {"user:7"}

    def test_inputs_not_mutated(self) -> None:
        """Test that the catalog and response tags are left alone."""
        tags = collected(("article:1", "article"), ("user:2", "user"))
        response_tags = {"article_list"}
        catalog = {"article": ["article_list"], "user": ["user_list"]}
        expected_response_tags = copy.deepcopy(response_tags)
        expected_catalog = copy.deepcopy(catalog)
        result = suppress_listed(tags, response_tags, catalog)
        assert result.tags == ("user:2",)
        assert response_tags == expected_response_tags
        assert catalog == expected_catalog
        assert tags.tags == ("article:1", "user:2")
