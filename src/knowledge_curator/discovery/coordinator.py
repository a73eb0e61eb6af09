"""
Multi-source discovery coordinator.

Fans one query out to every enabled source concurrently, isolates per-source
failures and timeouts, then merges what came back with a selectable strategy.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass

from pydantic import ValidationError

from ..errors import NoEnabledSourcesError, SourceCallError, SourceError, SourceTimeoutError
from ..models import (
    AggregationStrategy,
    ContentItem,
    DiscoveryResult,
    SearchOptions,
    SourceConfig,
    SourcedContentResult,
    SourceOutcome,
)
from ..settings import settings
from . import aggregation
from .base import RelevanceScorer, SourceConnector
from .registry import RegisteredSource, SourceRegistry
from .scoring import KeywordRelevanceScorer

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _SourceRun:
    outcome: SourceOutcome
    items: list[ContentItem]
    weight: float


class MultiSourceDiscovery:
    """Coordinates discovery across registered sources.

    Every enabled source runs as its own task raced against `timeout_ms`.
    Timed out tasks are cancelled at their next await point; a connector that
    blocks the event loop cannot be interrupted.
    """

    def __init__(self, registry: SourceRegistry | None = None, scorer: RelevanceScorer | None = None):
        self.registry = registry or SourceRegistry()
        self.scorer = scorer or KeywordRelevanceScorer()

    # Registry passthroughs

    def register_source(self, source: str, connector: SourceConnector, config: SourceConfig | None = None) -> None:
        self.registry.register_source(source, connector, config)

    def unregister_source(self, source: str) -> None:
        self.registry.unregister_source(source)

    def get_available_sources(self) -> list[str]:
        return self.registry.get_available_sources()

    def get_source_config(self, source: str) -> SourceConfig | None:
        return self.registry.get_source_config(source)

    def update_source_config(self, source: str, **changes) -> SourceConfig | None:
        return self.registry.update_source_config(source, **changes)

    # Discovery

    async def discover_from_multiple_sources(
        self,
        query: str,
        options: SearchOptions | None = None,
        strategy: AggregationStrategy | str = AggregationStrategy.WEIGHTED_MERGE,
    ) -> SourcedContentResult:
        strategy = AggregationStrategy(strategy)
        options = options or SearchOptions()
        t0 = time.perf_counter()
        logger.debug("Multi-source discovery for %r using %s", query, strategy.value)

        candidates = self.registry.enabled_sources(options.sources)
        if not candidates:
            raise NoEnabledSourcesError()
        registered = len(self.registry)

        runs = await asyncio.gather(*(self._run_source(entry, query, options) for entry in candidates))

        succeeded = [r for r in runs if r.outcome.success]
        pool = [aggregation.WeightedItem(it, r.weight) for r in succeeded for it in r.items]
        items = aggregation.aggregate(pool, query, strategy, self.scorer)

        breakdown = {r.outcome.source: r.items for r in succeeded}
        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        logger.info(
            "Multi-source discovery completed: %d items from %d/%d sources in %.0fms",
            len(items),
            len(succeeded),
            len(candidates),
            elapsed_ms,
        )

        outcomes = [r.outcome for r in runs]
        return SourcedContentResult(
            items=items,
            total_found=len(items),
            search_time_ms=elapsed_ms,
            sources=[r.outcome.source for r in succeeded],
            source_breakdown=breakdown,
            quality_metrics=aggregation.quality_metrics(
                items, contributing=len(breakdown), registered=registered
            ),
            performance_metrics=aggregation.performance_metrics(outcomes),
            outcomes=outcomes,
        )

    async def _run_source(self, entry: RegisteredSource, query: str, options: SearchOptions) -> _SourceRun:
        cfg = entry.config
        effective = options.model_copy(
            update={"max_results": min(cfg.max_results, options.max_results or settings.default_max_results)}
        )
        t0 = time.perf_counter()
        try:
            result = await self._call(entry, query, effective)
        except SourceError as e:
            elapsed = (time.perf_counter() - t0) * 1000.0
            logger.warning("Source %s failed (%s): %s", entry.source, e.kind, e)
            return _SourceRun(
                SourceOutcome(source=entry.source, success=False, elapsed_ms=elapsed, error=str(e), error_kind=e.kind),
                [],
                cfg.reliability_weight,
            )

        elapsed = (time.perf_counter() - t0) * 1000.0
        items = [self._attribute(it, entry.source) for it in result.items]
        logger.debug("%s completed in %.0fms with %d items", entry.source, elapsed, len(items))
        return _SourceRun(
            SourceOutcome(source=entry.source, success=True, elapsed_ms=elapsed, item_count=len(items)),
            items,
            cfg.reliability_weight,
        )

    @staticmethod
    async def _call(entry: RegisteredSource, query: str, options: SearchOptions) -> DiscoveryResult:
        timeout_s = entry.config.timeout_ms / 1000.0
        try:
            result = await asyncio.wait_for(entry.connector.discover(query, options), timeout=timeout_s)
        except TimeoutError as e:
            raise SourceTimeoutError(entry.source, entry.config.timeout_ms) from e
        except Exception as e:
            raise SourceCallError(entry.source, e) from e
        if isinstance(result, DiscoveryResult):
            return result
        try:
            return DiscoveryResult.model_validate(result)
        except ValidationError as e:
            raise SourceCallError(entry.source, e) from e

    @staticmethod
    def _attribute(item: ContentItem, source: str) -> ContentItem:
        if item.source == source:
            return item
        return item.model_copy(update={"source": source})
