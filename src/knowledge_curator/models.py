from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .settings import settings

logger = logging.getLogger(__name__)

_DEFAULTABLE = ("title", "content", "tags", "metadata")


class ContentMetadata(BaseModel):
    author: str | None = None
    publish_date: datetime | None = None
    word_count: int | None = None
    content_type: str | None = None  # e.g. documentation, tutorial, paper, video
    language: str | None = None
    difficulty: Literal["beginner", "intermediate", "advanced"] | None = None

    # Provider specific fields (view counts, venue, raw ids...)
    extra: dict[str, Any] = Field(default_factory=dict)


class ContentItem(BaseModel):
    """A unit of curated content.

    `id` is assigned by the caller and must be unique within a graph.
    Missing text, tags or metadata are treated as empty rather than rejected.
    """

    id: str
    title: str = ""
    url: str | None = None
    content: str = ""
    source: str = "unknown"
    tags: list[str] = Field(default_factory=list)
    metadata: ContentMetadata = Field(default_factory=ContentMetadata)
    relevance_score: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def _fill_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        missing = [k for k in _DEFAULTABLE if data.get(k) is None]
        if missing:
            logger.debug("Content %s missing %s; using empty defaults", data.get("id"), ", ".join(missing))
            data = {k: v for k, v in data.items() if not (k in _DEFAULTABLE and v is None)}
        return data

    @field_validator("tags", mode="before")
    @classmethod
    def _drop_empty_tags(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [v] if v.strip() else []
        if isinstance(v, (list, tuple, set, frozenset)):
            return [str(t) for t in v if t is not None and str(t).strip()]
        return v

    @field_validator("relevance_score", mode="before")
    @classmethod
    def _clamp_relevance(cls, v: Any) -> float:
        try:
            f = float(v)
        except (TypeError, ValueError):
            return 0.0
        return max(0.0, min(1.0, f))

    @property
    def text_blob(self) -> str:
        """Title, body and tags as one lowercase string for mention checks."""
        return f"{self.title} {self.content} {' '.join(self.tags)}".lower()


class SourceConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    reliability_weight: float = Field(default_factory=lambda: settings.default_reliability_weight, ge=0.0, le=1.0)
    max_results: int = Field(default_factory=lambda: settings.default_max_results, ge=1)
    timeout_ms: int = Field(default_factory=lambda: settings.default_timeout_ms, gt=0)

    def merged(self, **changes: Any) -> SourceConfig:
        """Return a validated copy with `changes` applied; unspecified fields are kept."""
        return SourceConfig.model_validate({**self.model_dump(), **changes})


class SearchOptions(BaseModel):
    """Options passed to every connector. Unknown hints are carried through untouched."""

    model_config = ConfigDict(extra="allow")

    max_results: int | None = Field(default=None, ge=1)
    sources: list[str] | None = None
    difficulty: str | None = None
    include_code: bool | None = None
    language: str | None = None
    min_relevance: float | None = None


class DiscoveryResult(BaseModel):
    items: list[ContentItem] = Field(default_factory=list)
    total_found: int = 0
    search_time_ms: float = 0.0


class AggregationStrategy(str, Enum):
    WEIGHTED_MERGE = "weighted_merge"
    ROUND_ROBIN = "round_robin"
    QUALITY_FIRST = "quality_first"
    DIVERSITY_MAX = "diversity_max"


class SourceOutcome(BaseModel):
    source: str
    success: bool
    elapsed_ms: float = 0.0
    item_count: int = 0
    error: str | None = None
    error_kind: str | None = None  # timeout | call


class FailedSource(BaseModel):
    source: str
    reason: str
    kind: str


class QualityMetrics(BaseModel):
    average_relevance: float = 0.0
    source_diversity: float = 0.0
    total_sources: int = 0


class PerformanceMetrics(BaseModel):
    fastest_source: str | None = None
    slowest_source: str | None = None
    failed_sources: list[FailedSource] = Field(default_factory=list)

    @property
    def failed_source_ids(self) -> list[str]:
        return [f.source for f in self.failed_sources]


class SourcedContentResult(BaseModel):
    items: list[ContentItem] = Field(default_factory=list)
    total_found: int = 0
    search_time_ms: float = 0.0
    sources: list[str] = Field(default_factory=list)
    source_breakdown: dict[str, list[ContentItem]] = Field(default_factory=dict)
    quality_metrics: QualityMetrics = Field(default_factory=QualityMetrics)
    performance_metrics: PerformanceMetrics = Field(default_factory=PerformanceMetrics)
    outcomes: list[SourceOutcome] = Field(default_factory=list)
