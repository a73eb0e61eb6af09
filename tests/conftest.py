"""Pytest configuration and fixtures."""

from unittest.mock import Mock

import pytest

from knowledge_curator.models import ContentItem, DiscoveryResult


def _make_item(item_id: str, **fields) -> ContentItem:
    fields.setdefault("title", f"Item {item_id}")
    fields.setdefault("url", f"https://example.com/{item_id}")
    return ContentItem(id=item_id, **fields)


@pytest.fixture
def make_item():
    """Factory for ContentItem with a unique url per id."""
    return _make_item


@pytest.fixture
def fixed_scorer():
    """Relevance scorer that looks scores up by item id (default 0.5)."""

    def build(scores: dict[str, float] | None = None):
        scorer = Mock()
        scorer.score.side_effect = lambda item, query: (scores or {}).get(item.id, 0.5)
        return scorer

    return build


@pytest.fixture
def empty_result():
    return DiscoveryResult()
