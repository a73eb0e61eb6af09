"""Tests for the HTTP and static connectors, using httpx.MockTransport."""

from datetime import UTC, datetime

import httpx
import pytest

from knowledge_curator.discovery import MultiSourceDiscovery
from knowledge_curator.discovery.connectors import (
    ArxivConnector,
    CrossrefConnector,
    SemanticScholarConnector,
    StaticConnector,
)
from knowledge_curator.discovery.connectors.common import paper_item_id, strip_markup
from knowledge_curator.models import SearchOptions

ARXIV_FEED = """<feed xmlns="http://www.w3.org/2005/Atom"
      xmlns:opensearch="http://a9.com/-/spec/opensearch/1.1/"
      xmlns:arxiv="http://arxiv.org/schemas/atom">
  <opensearch:totalResults>42</opensearch:totalResults>
  <entry>
    <id>http://arxiv.org/abs/2101.00001v2</id>
    <published>2021-01-01T00:00:00Z</published>
    <title>Graph  Neural
      Networks</title>
    <summary>  A survey of GNNs. </summary>
    <author><name>Jane Doe</name></author>
    <author><name>John Roe</name></author>
    <link title="pdf" href="http://arxiv.org/pdf/2101.00001v2"/>
    <category term="cs.LG"/>
  </entry>
</feed>
"""

S2_BODY = {
    "total": 1,
    "data": [
        {
            "paperId": "abc123",
            "title": "Attention Is All You Need",
            "abstract": "We propose the Transformer.",
            "externalIds": {"DOI": "10.5555/XYZ"},
            "url": "https://www.semanticscholar.org/paper/abc123",
            "authors": [{"name": "A. Vaswani"}],
            "publicationDate": "2017-06-12",
            "fieldsOfStudy": ["Computer Science"],
        },
        {"title": "No identifiers at all"},
    ],
}

CROSSREF_BODY = {
    "message": {
        "total-results": 5,
        "items": [
            {
                "DOI": "10.2/ABC",
                "title": ["Deep nets"],
                "abstract": "<jats:p>Some   abstract</jats:p>",
                "author": [{"given": "Ada", "family": "Lovelace"}],
                "issued": {"date-parts": [[2020, 5]]},
                "subject": ["Artificial Intelligence"],
                "URL": "https://doi.org/10.2/abc",
            }
        ],
    }
}


class TestArxivConnector:
    @pytest.mark.asyncio
    async def test_parses_atom_feed(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text=ARXIV_FEED)

        async with ArxivConnector(transport=httpx.MockTransport(handler)) as arxiv:
            result = await arxiv.discover("graph neural networks", SearchOptions(max_results=3))

        assert result.total_found == 42
        paper = result.items[0]
        assert paper.id == "arxiv:2101.00001v2"
        assert paper.title == "Graph Neural Networks"
        assert paper.content == "A survey of GNNs."
        assert paper.tags == ["cs.LG"]
        assert paper.source == "arxiv"
        assert paper.metadata.author == "Jane Doe, John Roe"
        assert paper.metadata.content_type == "paper"
        assert paper.metadata.publish_date == datetime(2021, 1, 1, tzinfo=UTC)
        assert paper.metadata.extra["pdf_url"] == "http://arxiv.org/pdf/2101.00001v2"

        params = seen[0].url.params
        assert params["search_query"] == "all:graph neural networks"
        assert params["max_results"] == "3"

    @pytest.mark.asyncio
    async def test_blank_query_skips_request(self):
        def handler(request):
            raise AssertionError("no request expected")

        async with ArxivConnector(transport=httpx.MockTransport(handler)) as arxiv:
            result = await arxiv.discover("   ", SearchOptions())
        assert result.items == []


class TestSemanticScholarConnector:
    @pytest.mark.asyncio
    async def test_maps_papers(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=S2_BODY)

        async with SemanticScholarConnector(api_key="k", transport=httpx.MockTransport(handler)) as s2:
            result = await s2.discover("transformers", SearchOptions(max_results=4))

        assert [it.id for it in result.items] == ["doi:10.5555/xyz"]
        paper = result.items[0]
        assert paper.tags == ["Computer Science"]
        assert paper.metadata.author == "A. Vaswani"
        assert paper.metadata.word_count == 4
        assert seen[0].url.path == "/graph/v1/paper/search"
        assert seen[0].url.params["limit"] == "4"
        assert seen[0].headers["x-api-key"] == "k"

    @pytest.mark.asyncio
    async def test_retries_transient_errors(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ConnectError("connection reset", request=request)
            return httpx.Response(200, json={"total": 0, "data": []})

        async with SemanticScholarConnector(transport=httpx.MockTransport(handler)) as s2:
            result = await s2.discover("anything", SearchOptions())

        assert len(calls) == 2
        assert result.items == []


class TestCrossrefConnector:
    @pytest.mark.asyncio
    async def test_maps_works(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/works"
            assert "mailto:me@example.org" in request.headers["user-agent"]
            return httpx.Response(200, json=CROSSREF_BODY)

        async with CrossrefConnector(mailto="me@example.org", transport=httpx.MockTransport(handler)) as cr:
            result = await cr.discover("deep nets", SearchOptions())

        assert result.total_found == 5
        paper = result.items[0]
        assert paper.id == "doi:10.2/abc"
        assert paper.content == "Some abstract"
        assert paper.metadata.author == "Ada Lovelace"
        assert paper.metadata.publish_date == datetime(2020, 5, 1, tzinfo=UTC)
        assert paper.tags == ["Artificial Intelligence"]

    @pytest.mark.asyncio
    async def test_http_error_is_a_source_failure(self):
        def handler(request):
            return httpx.Response(500, json={"status": "error"})

        cr = CrossrefConnector(transport=httpx.MockTransport(handler))
        discovery = MultiSourceDiscovery()
        discovery.register_source("crossref", cr)
        try:
            result = await discovery.discover_from_multiple_sources("anything")
        finally:
            await cr.aclose()

        assert result.items == []
        assert [(f.source, f.kind) for f in result.performance_metrics.failed_sources] == [("crossref", "call")]


class TestStaticConnector:
    @pytest.mark.asyncio
    async def test_filters_by_query_words(self, make_item):
        connector = StaticConnector.of(
            [
                make_item("1", title="Python asyncio", relevance_score=0.9),
                make_item("2", title="Go channels", relevance_score=0.8),
                {"id": "3", "title": "More python", "relevance_score": 0.1},
            ]
        )

        result = await connector.discover("python", SearchOptions())
        assert [it.id for it in result.items] == ["1", "3"]
        assert result.total_found == 2

        result = await connector.discover("python", SearchOptions(min_relevance=0.5))
        assert [it.id for it in result.items] == ["1"]

        result = await connector.discover("python go", SearchOptions(max_results=1))
        assert [it.id for it in result.items] == ["1"]
        assert result.total_found == 3

        assert (await connector.discover("", SearchOptions())).items == []


class TestHelpers:
    def test_paper_item_id_priority(self):
        assert paper_item_id(doi="10.1/ABC", arxiv_id="1", s2_id="s") == "doi:10.1/abc"
        assert paper_item_id(arxiv_id="2101.1", s2_id="s") == "arxiv:2101.1"
        assert paper_item_id(s2_id="s") == "s2:s"
        assert paper_item_id() is None

    def test_strip_markup(self):
        assert strip_markup("<p>a <b>bold</b>\nword</p>") == "a bold word"
        assert strip_markup(None) == ""
