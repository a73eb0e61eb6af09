"""Tests for the in-memory knowledge graph store."""

import pytest

from knowledge_curator.linking import KnowledgeGraphStore, KnowledgeLink, LinkType
from knowledge_curator.models import ContentItem


@pytest.fixture
def store():
    s = KnowledgeGraphStore()
    for i in ("a", "b", "c"):
        s.put_node(ContentItem(id=i, title=i.upper(), tags=[i]))
    s.append_links(
        [
            KnowledgeLink("a", "b", LinkType.SIMILAR, 0.5, "Shared topics: x", True),
            KnowledgeLink("b", "a", LinkType.SIMILAR, 0.5, "Bidirectional: Shared topics: x", True),
            KnowledgeLink("c", "a", LinkType.DEPENDENCY, 0.8, "c depends on a"),
        ]
    )
    return s


class TestKnowledgeGraphStore:
    def test_stats(self, store):
        stats = store.get_graph_stats()
        assert stats.node_count == 3
        assert stats.link_count == 3
        assert stats.average_links == pytest.approx(1.0)
        assert stats.link_types == {"similar": 2, "dependency": 1}

    def test_empty_stats(self):
        stats = KnowledgeGraphStore().get_graph_stats()
        assert (stats.node_count, stats.link_count, stats.average_links, stats.link_types) == (0, 0, 0.0, {})

    def test_links_for_content(self, store):
        assert len(store.get_links_for_content("a")) == 3
        assert [l.source_id for l in store.get_links_for_content("c")] == ["c"]
        assert store.get_links_for_content("zzz") == []

    def test_put_node_overwrites(self, store):
        store.put_node(ContentItem(id="a", title="New A"))
        assert len(store) == 3
        assert store.get_node("a").title == "New A"
        assert store.get_links_for_content("a")

    def test_export_is_a_deep_copy(self, store):
        store.add_cluster(["a", "b"])
        graph = store.export_graph()

        graph.nodes["a"].title = "mutated"
        graph.nodes["a"].tags.append("extra")
        graph.nodes.pop("b")
        graph.links.clear()
        graph.clusters[0].append("c")

        assert store.get_node("a").title == "A"
        assert store.get_node("a").tags == ["a"]
        assert "b" in store
        assert store.get_graph_stats().link_count == 3
        assert store.export_graph().clusters == [["a", "b"]]

    def test_clusters(self, store):
        assert store.add_cluster(["a", "c"]) == ["a", "c"]
        with pytest.raises(KeyError):
            store.add_cluster(["a", "missing"])
        assert store.export_graph().clusters == [["a", "c"]]

    def test_clear(self, store):
        store.add_cluster(["a"])
        store.clear()
        graph = store.export_graph()
        assert len(store) == 0
        assert graph.nodes == {}
        assert graph.links == []
        assert graph.clusters == []
