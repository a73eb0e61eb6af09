from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from ..models import ContentItem
from ..settings import settings


class LinkType(str, Enum):
    SIMILAR = "similar"
    RELATED = "related"
    DEPENDENCY = "dependency"
    HIERARCHY = "hierarchy"
    TEMPORAL = "temporal"


@dataclass(frozen=True, slots=True)
class KnowledgeLink:
    """A typed, directed, strength-weighted edge between two content ids.

    Immutable once created. `bidirectional` marks links whose reverse
    direction is materialized as its own entry.
    """

    source_id: str
    target_id: str
    link_type: LinkType
    strength: float
    reason: str
    bidirectional: bool = False

    def __post_init__(self):
        object.__setattr__(self, "link_type", LinkType(self.link_type))
        object.__setattr__(self, "strength", max(0.0, min(1.0, float(self.strength))))

    def mirrored(self) -> KnowledgeLink:
        return KnowledgeLink(
            source_id=self.target_id,
            target_id=self.source_id,
            link_type=self.link_type,
            strength=self.strength,
            reason=f"Bidirectional: {self.reason}",
            bidirectional=True,
        )


@dataclass(slots=True)
class LinkingOptions:
    min_link_strength: float = 0.3
    max_links_per_content: int = 10
    enable_bidirectional: bool = True
    link_types: frozenset[LinkType] | None = None

    def __post_init__(self):
        if self.link_types is not None:
            self.link_types = frozenset(LinkType(t) for t in self.link_types)

    @classmethod
    def from_settings(cls, link_types: Iterable[LinkType | str] | None = None) -> LinkingOptions:
        return cls(
            min_link_strength=settings.min_link_strength,
            max_links_per_content=settings.max_links_per_content,
            enable_bidirectional=settings.enable_bidirectional,
            link_types=frozenset(link_types) if link_types is not None else None,
        )

    def allows(self, link: KnowledgeLink) -> bool:
        if link.strength < self.min_link_strength:
            return False
        return self.link_types is None or link.link_type in self.link_types


@dataclass(slots=True)
class GraphStats:
    node_count: int
    link_count: int
    average_links: float
    link_types: dict[str, int] = field(default_factory=dict)


@dataclass(slots=True)
class KnowledgeGraph:
    """Point-in-time copy of the graph. Never aliases the store's storage."""

    nodes: dict[str, ContentItem] = field(default_factory=dict)
    links: list[KnowledgeLink] = field(default_factory=list)
    clusters: list[list[str]] = field(default_factory=list)
