"""
Knowledge Curator - multi-source discovery and knowledge linking
"""

from .discovery import KeywordRelevanceScorer, MultiSourceDiscovery, SourceRegistry
from .errors import (
    CuratorError,
    NoEnabledSourcesError,
    RelationRulesError,
    SourceCallError,
    SourceError,
    SourceTimeoutError,
    UnknownSourceError,
)
from .linking import KnowledgeLink, KnowledgeLinkingEngine, LinkingOptions, LinkType
from .models import (
    AggregationStrategy,
    ContentItem,
    ContentMetadata,
    DiscoveryResult,
    SearchOptions,
    SourceConfig,
    SourcedContentResult,
)

__version__ = "0.1.0"

__all__ = [
    "AggregationStrategy",
    "ContentItem",
    "ContentMetadata",
    "CuratorError",
    "DiscoveryResult",
    "KeywordRelevanceScorer",
    "KnowledgeLink",
    "KnowledgeLinkingEngine",
    "LinkType",
    "LinkingOptions",
    "MultiSourceDiscovery",
    "NoEnabledSourcesError",
    "RelationRulesError",
    "SearchOptions",
    "SourceCallError",
    "SourceConfig",
    "SourceError",
    "SourceRegistry",
    "SourceTimeoutError",
    "SourcedContentResult",
    "UnknownSourceError",
]
