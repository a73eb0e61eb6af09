"""Multi-source discovery.

This package provides:
- A source registry holding connector + config per source
- A fan-out coordinator with per-source timeouts and failure isolation
- Deduplication, four merge strategies and result metrics
"""

from .base import RelevanceScorer, SourceConnector
from .coordinator import MultiSourceDiscovery
from .registry import SourceRegistry
from .scoring import KeywordRelevanceScorer

__all__ = [
    "KeywordRelevanceScorer",
    "MultiSourceDiscovery",
    "RelevanceScorer",
    "SourceConnector",
    "SourceRegistry",
]
