"""Deduplication, merge strategies and metrics for multi-source results."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime

from ..models import (
    AggregationStrategy,
    ContentItem,
    FailedSource,
    PerformanceMetrics,
    QualityMetrics,
    SourceOutcome,
)
from .base import RelevanceScorer

logger = logging.getLogger(__name__)

PREFERRED_CONTENT_TYPES = {"documentation", "tutorial"}
DIVERSITY_FLOOR = 5


@dataclass(slots=True)
class WeightedItem:
    """A raw item paired with the reliability weight of the source that returned it."""

    item: ContentItem
    source_weight: float


def dedupe_key(item: ContentItem) -> str:
    return item.url or f"{item.title}-{item.source}"


def remove_duplicates(items: Iterable[WeightedItem]) -> list[WeightedItem]:
    """First occurrence wins."""
    seen: set[str] = set()
    out: list[WeightedItem] = []
    for w in items:
        key = dedupe_key(w.item)
        if key in seen:
            continue
        seen.add(key)
        out.append(w)
    return out


def quality_score(item: ContentItem, *, now: datetime | None = None) -> float:
    """0..1 heuristic from metadata completeness, freshness and content type."""
    md = item.metadata
    score = 0.0

    wc = md.word_count or 0
    if 200 <= wc <= 1000:
        score += 0.3
    elif wc > 100:
        score += 0.1

    if md.author and md.author.strip() and md.author != "Unknown":
        score += 0.2

    if md.publish_date is not None:
        now = now or datetime.now(UTC)
        published = md.publish_date
        if published.tzinfo is None:
            published = published.replace(tzinfo=UTC)
        age_days = (now - published).total_seconds() / 86400
        if age_days < 30:
            score += 0.2
        elif age_days < 365:
            score += 0.1

    if len(item.tags) > 2:
        score += 0.2

    if (md.content_type or "").lower() in PREFERRED_CONTENT_TYPES:
        score += 0.1

    return min(score, 1.0)


def _relevance(scorer: RelevanceScorer, item: ContentItem, query: str) -> float:
    try:
        s = float(scorer.score(item, query))
    except Exception as e:
        logger.warning("Relevance scorer failed for %s: %s; keeping source score", item.id, e)
        return item.relevance_score
    return max(0.0, min(1.0, s))


def _rescored(items: list[WeightedItem], score: Callable[[WeightedItem], float]) -> list[ContentItem]:
    scored = [w.item.model_copy(update={"relevance_score": score(w)}) for w in items]
    scored.sort(key=lambda it: it.relevance_score, reverse=True)
    return scored


def weighted_merge(items: list[WeightedItem], query: str, scorer: RelevanceScorer) -> list[ContentItem]:
    return _rescored(items, lambda w: _relevance(scorer, w.item, query) * 0.7 + w.source_weight * 0.3)


def quality_first_merge(
    items: list[WeightedItem], query: str, scorer: RelevanceScorer, *, now: datetime | None = None
) -> list[ContentItem]:
    return _rescored(
        items,
        lambda w: _relevance(scorer, w.item, query) * 0.4
        + quality_score(w.item, now=now) * 0.4
        + w.source_weight * 0.2,
    )


def round_robin_merge(items: list[WeightedItem]) -> list[ContentItem]:
    by_source: dict[str, list[ContentItem]] = {}
    for w in items:
        by_source.setdefault(w.item.source, []).append(w.item)

    out: list[ContentItem] = []
    rounds = max((len(v) for v in by_source.values()), default=0)
    for i in range(rounds):
        for bucket in by_source.values():
            if i < len(bucket):
                out.append(bucket[i])
    return out


def diversity_max_merge(items: list[WeightedItem]) -> list[ContentItem]:
    remaining = sorted((w.item for w in items), key=lambda it: it.relevance_score, reverse=True)
    seen_sources: set[str] = set()
    seen_types: set[str] = set()
    out: list[ContentItem] = []

    while remaining:
        top = remaining[0].relevance_score
        tied = [it for it in remaining if it.relevance_score == top]
        pick = next((it for it in tied if it.source not in seen_sources), None)
        if pick is None:
            pick = next((it for it in tied if _ctype(it) not in seen_types), tied[0])
        remaining.remove(pick)

        new_source = pick.source not in seen_sources
        new_type = _ctype(pick) not in seen_types
        if new_source or new_type or len(out) < DIVERSITY_FLOOR:
            out.append(pick)
            seen_sources.add(pick.source)
            seen_types.add(_ctype(pick))
    return out


def _ctype(item: ContentItem) -> str:
    return item.metadata.content_type or "unknown"


def aggregate(
    items: list[WeightedItem],
    query: str,
    strategy: AggregationStrategy,
    scorer: RelevanceScorer,
) -> list[ContentItem]:
    unique = remove_duplicates(items)
    if len(unique) < len(items):
        logger.debug("Dropped %d duplicate items", len(items) - len(unique))

    if strategy is AggregationStrategy.ROUND_ROBIN:
        return round_robin_merge(unique)
    if strategy is AggregationStrategy.QUALITY_FIRST:
        return quality_first_merge(unique, query, scorer)
    if strategy is AggregationStrategy.DIVERSITY_MAX:
        return diversity_max_merge(unique)
    return weighted_merge(unique, query, scorer)


def quality_metrics(items: list[ContentItem], *, contributing: int, registered: int) -> QualityMetrics:
    avg = sum(it.relevance_score for it in items) / len(items) if items else 0.0
    return QualityMetrics(
        average_relevance=avg,
        source_diversity=contributing / max(registered, 1),
        total_sources=contributing,
    )


def performance_metrics(outcomes: list[SourceOutcome]) -> PerformanceMetrics:
    ok = sorted((o for o in outcomes if o.success), key=lambda o: o.elapsed_ms)
    failed = [
        FailedSource(source=o.source, reason=o.error or "unknown error", kind=o.error_kind or "call")
        for o in outcomes
        if not o.success
    ]
    return PerformanceMetrics(
        fastest_source=ok[0].source if ok else None,
        slowest_source=ok[-1].source if ok else None,
        failed_sources=failed,
    )
