"""Shared pytest fixtures."""

from dataclasses import dataclass, field

import pytest

from tagleak import (
    LeakSettings,
    OperationMode,
    RequestContext,
    StaticListingCatalog,
    TagCollector,
)


@dataclass
class FakeRecord:
    """Minimal trackable record."""

    record_type: str
    record_id: int
    cache_tags: list[str] = field(default_factory=list)


@dataclass
class FakeResponse:
    """Cacheable response with an in-memory body."""

    content: str | bytes = "<html><body><p>Hello</p></body></html>"
    cache_tags: list[str] = field(default_factory=list)

    def get_cache_tags(self) -> list[str]:
        return list(self.cache_tags)

    def get_content(self) -> str | bytes:
        return self.content

    def set_content(self, content: str | bytes) -> None:
        self.content = content


@dataclass
class PlainResponse:
    """Response without cache metadata."""

    content: str = "<html><body></body></html>"


def article(record_id: int, *extra_tags: str) -> FakeRecord:
    return FakeRecord("article", record_id, [f"article:{record_id}", *extra_tags])


@pytest.fixture
def collector() -> TagCollector:
    """Create a fresh TagCollector for each test."""
    return TagCollector()


@pytest.fixture
def strict_settings() -> LeakSettings:
    return LeakSettings(operation_mode=OperationMode.STRICT)


@pytest.fixture
def catalog() -> StaticListingCatalog:
    return StaticListingCatalog({"article": ["article_list"], "user": ["user_list"]})


@pytest.fixture
def context() -> RequestContext:
    return RequestContext(path="/news", route_name="news.index")
