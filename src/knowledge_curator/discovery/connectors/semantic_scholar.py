from __future__ import annotations

import time
from datetime import UTC, datetime

import httpx

from ...http import transient_retry
from ...models import ContentItem, DiscoveryResult, SearchOptions
from ...settings import settings
from .common import HttpConnector, paper_item, paper_item_id

_FIELDS = "title,abstract,year,authors,venue,publicationDate,externalIds,url,fieldsOfStudy,citationCount"


class SemanticScholarConnector(HttpConnector):
    """Semantic Scholar Graph API connector.

    Docs: https://api.semanticscholar.org/

    Unauthenticated access is heavily rate limited; set
    KNOWLEDGE_CURATOR_SEMANTIC_SCHOLAR_API_KEY for real use.
    """

    source = "semantic_scholar"

    def __init__(self, *, api_key: str | None = None, transport: httpx.AsyncBaseTransport | None = None):
        headers = {}
        key = api_key or settings.semantic_scholar_api_key
        if key:
            headers["x-api-key"] = key
        super().__init__(base_url="https://api.semanticscholar.org/graph/v1", headers=headers, transport=transport)

    async def discover(self, query: str, options: SearchOptions) -> DiscoveryResult:
        t0 = time.perf_counter()
        if not query.strip():
            return DiscoveryResult()
        items, total = await self.search(query, limit=options.max_results or 10)
        return DiscoveryResult(items=items, total_found=total, search_time_ms=(time.perf_counter() - t0) * 1000.0)

    @transient_retry()
    async def search(self, query: str, limit: int = 10, offset: int = 0) -> tuple[list[ContentItem], int]:
        r = await self._client.get(
            "/paper/search",
            params={"query": query, "limit": limit, "offset": offset, "fields": _FIELDS},
        )
        r.raise_for_status()
        body = r.json()
        data = body.get("data") or []
        items = [it for it in (self._to_item(x) for x in data) if it is not None]
        return items, int(body.get("total") or len(items))

    def _to_item(self, d: dict) -> ContentItem | None:
        ext = d.get("externalIds") or {}
        item_id = paper_item_id(doi=ext.get("DOI"), arxiv_id=ext.get("ArXiv"), s2_id=d.get("paperId"))
        if item_id is None:
            return None

        published: datetime | None = None
        if d.get("publicationDate"):
            try:
                published = datetime.fromisoformat(d["publicationDate"]).replace(tzinfo=UTC)
            except ValueError:
                pass

        authors = [a["name"] for a in d.get("authors") or [] if a.get("name")]

        return paper_item(
            item_id=item_id,
            source=self.source,
            title=d.get("title") or "",
            abstract=d.get("abstract") or "",
            url=d.get("url"),
            authors=authors,
            published=published,
            tags=list(d.get("fieldsOfStudy") or []),
            extra={
                "venue": d.get("venue"),
                "year": d.get("year"),
                "citation_count": d.get("citationCount"),
            },
        )
