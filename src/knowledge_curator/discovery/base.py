from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..models import ContentItem, DiscoveryResult, SearchOptions


@runtime_checkable
class SourceConnector(Protocol):
    """One upstream origin of content.

    Returning an empty result is normal; raising means the source failed.
    Implementations should await regularly so a timeout can cancel them.
    """

    async def discover(self, query: str, options: SearchOptions) -> DiscoveryResult: ...


class RelevanceScorer(Protocol):
    """Pure function mapping (item, query) to a score in [0, 1]."""

    def score(self, item: ContentItem, query: str) -> float: ...
