from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from typing import Any

from ..models import ContentItem
from .detector import RelationshipDetector
from .graph import KnowledgeGraphStore
from .models import GraphStats, KnowledgeGraph, KnowledgeLink, LinkingOptions

logger = logging.getLogger(__name__)


class KnowledgeLinkingEngine:
    """Incrementally builds a knowledge graph, one content item at a time.

    Each insertion compares the new item against every node already stored.
    Pairs of existing nodes are never recomputed.
    """

    def __init__(
        self,
        store: KnowledgeGraphStore | None = None,
        detector: RelationshipDetector | None = None,
        default_options: LinkingOptions | None = None,
    ):
        self.store = store or KnowledgeGraphStore()
        self.detector = detector or RelationshipDetector()
        self.default_options = default_options or LinkingOptions.from_settings()

    def add_content(
        self, item: ContentItem | dict[str, Any], options: LinkingOptions | None = None
    ) -> list[KnowledgeLink]:
        if not isinstance(item, ContentItem):
            item = ContentItem.model_validate(item)
        opts = options or self.default_options

        t0 = time.perf_counter()
        links = self.detector.detect(item, self.store.nodes(), opts)
        self.store.put_node(item)
        self.store.append_links(links)
        logger.info(
            "Added content %s: %d links, graph now %d nodes (%.0fms)",
            item.id,
            len(links),
            len(self.store),
            (time.perf_counter() - t0) * 1000.0,
        )
        return links

    def get_links_for_content(self, content_id: str) -> list[KnowledgeLink]:
        return self.store.get_links_for_content(content_id)

    def get_graph_stats(self) -> GraphStats:
        return self.store.get_graph_stats()

    def export_graph(self) -> KnowledgeGraph:
        return self.store.export_graph()

    def add_cluster(self, content_ids: Iterable[str]) -> list[str]:
        return self.store.add_cluster(content_ids)

    def clear(self) -> None:
        self.store.clear()
        self.detector.forget()
