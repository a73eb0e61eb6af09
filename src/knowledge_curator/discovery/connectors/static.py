from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field

from ...models import ContentItem, DiscoveryResult, SearchOptions

logger = logging.getLogger(__name__)


@dataclass
class StaticConnector:
    """In-memory catalogue connector for offline runs and tests.

    Returns catalogue items whose title, body or tags contain any query word,
    in catalogue order. `delay_s` simulates network latency.
    """

    items: list[ContentItem] = field(default_factory=list)
    delay_s: float = 0.0

    @classmethod
    def of(cls, items: Iterable[ContentItem | dict], *, delay_s: float = 0.0) -> StaticConnector:
        return cls(
            items=[it if isinstance(it, ContentItem) else ContentItem.model_validate(it) for it in items],
            delay_s=delay_s,
        )

    async def discover(self, query: str, options: SearchOptions) -> DiscoveryResult:
        t0 = time.perf_counter()
        if self.delay_s:
            await asyncio.sleep(self.delay_s)

        words = [w for w in query.lower().split() if w]
        if not words:
            return DiscoveryResult()

        matched = [it for it in self.items if any(w in it.text_blob for w in words)]
        if options.min_relevance is not None:
            matched = [it for it in matched if it.relevance_score >= options.min_relevance]
        limit = options.max_results or len(matched)
        logger.debug("Static catalogue matched %d/%d items for %r", len(matched), len(self.items), query)
        return DiscoveryResult(
            items=matched[:limit],
            total_found=len(matched),
            search_time_ms=(time.perf_counter() - t0) * 1000.0,
        )
