"""Knowledge linking.

This package provides:
- Typed, strength-weighted links between content items
- Similarity, dependency, hierarchy and version relationship detection
- Data-driven relation rules (built-in or loaded from JSON)
- An in-memory graph store with stats, clusters and snapshot export
"""

from .detector import RelationshipDetector
from .engine import KnowledgeLinkingEngine
from .graph import KnowledgeGraphStore
from .models import GraphStats, KnowledgeGraph, KnowledgeLink, LinkingOptions, LinkType
from .rules import RelationRule, RelationRuleSet, default_rule_set, load_relation_rules

__all__ = [
    "GraphStats",
    "KnowledgeGraph",
    "KnowledgeGraphStore",
    "KnowledgeLink",
    "KnowledgeLinkingEngine",
    "LinkType",
    "LinkingOptions",
    "RelationRule",
    "RelationRuleSet",
    "RelationshipDetector",
    "default_rule_set",
    "load_relation_rules",
]
