from __future__ import annotations

import copy
from collections import Counter
from collections.abc import Iterable

from ..models import ContentItem
from .models import GraphStats, KnowledgeGraph, KnowledgeLink


class KnowledgeGraphStore:
    """In-memory node/link/cluster storage. Single owner, no locking."""

    def __init__(self):
        self._nodes: dict[str, ContentItem] = {}
        self._links: list[KnowledgeLink] = []
        self._clusters: list[list[str]] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, content_id: object) -> bool:
        return content_id in self._nodes

    def put_node(self, item: ContentItem) -> None:
        self._nodes[item.id] = item

    def get_node(self, content_id: str) -> ContentItem | None:
        return self._nodes.get(content_id)

    def nodes(self) -> list[ContentItem]:
        return list(self._nodes.values())

    def append_links(self, links: Iterable[KnowledgeLink]) -> None:
        self._links.extend(links)

    def get_links_for_content(self, content_id: str) -> list[KnowledgeLink]:
        return [l for l in self._links if l.source_id == content_id or l.target_id == content_id]

    def add_cluster(self, content_ids: Iterable[str]) -> list[str]:
        ids = list(content_ids)
        missing = [i for i in ids if i not in self._nodes]
        if missing:
            raise KeyError(f"Unknown content ids in cluster: {', '.join(missing)}")
        self._clusters.append(ids)
        return list(ids)

    def get_graph_stats(self) -> GraphStats:
        node_count = len(self._nodes)
        link_count = len(self._links)
        types = Counter(l.link_type.value for l in self._links)
        return GraphStats(
            node_count=node_count,
            link_count=link_count,
            average_links=link_count / node_count if node_count else 0.0,
            link_types=dict(types),
        )

    def export_graph(self) -> KnowledgeGraph:
        return KnowledgeGraph(
            nodes={k: v.model_copy(deep=True) for k, v in self._nodes.items()},
            # links are frozen
            links=list(self._links),
            clusters=copy.deepcopy(self._clusters),
        )

    def clear(self) -> None:
        self._nodes.clear()
        self._links.clear()
        self._clusters.clear()
