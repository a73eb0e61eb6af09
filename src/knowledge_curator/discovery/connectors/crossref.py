from __future__ import annotations

import time
from datetime import UTC, datetime

import httpx

from ...http import transient_retry
from ...models import ContentItem, DiscoveryResult, SearchOptions
from ...settings import settings
from .common import HttpConnector, paper_item, paper_item_id, strip_markup


class CrossrefConnector(HttpConnector):
    """Crossref REST API connector.

    Docs: https://api.crossref.org/

    Use `mailto` for polite pool.
    """

    source = "crossref"

    def __init__(self, *, mailto: str | None = None, transport: httpx.AsyncBaseTransport | None = None):
        headers = {"User-Agent": "knowledge-curator/0.1 (mailto:%s)" % (mailto or settings.crossref_mailto or "")}
        super().__init__(base_url="https://api.crossref.org", headers=headers, transport=transport)

    async def discover(self, query: str, options: SearchOptions) -> DiscoveryResult:
        t0 = time.perf_counter()
        if not query.strip():
            return DiscoveryResult()
        items, total = await self.works(query, rows=options.max_results or 10)
        return DiscoveryResult(items=items, total_found=total, search_time_ms=(time.perf_counter() - t0) * 1000.0)

    @transient_retry()
    async def works(self, query: str, rows: int = 10, offset: int = 0) -> tuple[list[ContentItem], int]:
        r = await self._client.get("/works", params={"query": query, "rows": rows, "offset": offset})
        r.raise_for_status()
        message = r.json().get("message") or {}
        items = [it for it in (self._to_item(x) for x in message.get("items") or []) if it is not None]
        return items, int(message.get("total-results") or len(items))

    def _to_item(self, d: dict) -> ContentItem | None:
        item_id = paper_item_id(doi=d.get("DOI"))
        if item_id is None:
            return None

        authors = []
        for a in d.get("author") or []:
            name = " ".join([x for x in [a.get("given"), a.get("family")] if x])
            if name:
                authors.append(name)

        published = None
        issued = (d.get("issued") or {}).get("date-parts")
        if issued and issued[0] and issued[0][0]:
            try:
                parts = [int(p) for p in issued[0]] + [1, 1]
                published = datetime(parts[0], parts[1], parts[2], tzinfo=UTC)
            except (TypeError, ValueError):
                pass

        container = (d.get("container-title") or [None])[0]

        return paper_item(
            item_id=item_id,
            source=self.source,
            title=(d.get("title") or [""])[0] or "",
            abstract=strip_markup(d.get("abstract")),
            url=d.get("URL"),
            authors=authors,
            published=published,
            tags=list(d.get("subject") or []),
            extra={"venue": container, "type": d.get("type")},
        )
