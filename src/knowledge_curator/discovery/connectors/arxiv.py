from __future__ import annotations

import re
import time
import xml.etree.ElementTree as ET
from datetime import UTC, datetime

import httpx

from ...http import transient_retry
from ...models import ContentItem, DiscoveryResult, SearchOptions
from .common import HttpConnector, paper_item, paper_item_id

_ARXIV_API = "https://export.arxiv.org"
_NS = {
    "atom": "http://www.w3.org/2005/Atom",
    "arxiv": "http://arxiv.org/schemas/atom",
    "opensearch": "http://a9.com/-/spec/opensearch/1.1/",
}


def _strip(s: str | None) -> str | None:
    return re.sub(r"\s+", " ", s).strip() if s is not None else None


def _arxiv_id_from_id_url(id_url: str) -> str | None:
    # examples: http://arxiv.org/abs/2101.00001v2
    m = re.search(r"/abs/([^/]+)$", id_url)
    return m.group(1) if m else None


class ArxivConnector(HttpConnector):
    """arXiv API connector.

    arXiv's API is Atom XML. Results are newest first.
    """

    source = "arxiv"

    def __init__(self, *, transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(base_url=_ARXIV_API, transport=transport)

    async def discover(self, query: str, options: SearchOptions) -> DiscoveryResult:
        t0 = time.perf_counter()
        if not query.strip():
            return DiscoveryResult()
        items, total = await self.search(f"all:{query}", max_results=options.max_results or 10)
        return DiscoveryResult(items=items, total_found=total, search_time_ms=(time.perf_counter() - t0) * 1000.0)

    @transient_retry()
    async def search(self, query: str, start: int = 0, max_results: int = 10) -> tuple[list[ContentItem], int]:
        params = {
            "search_query": query,
            "start": start,
            "max_results": max_results,
            "sortBy": "submittedDate",
            "sortOrder": "descending",
        }
        r = await self._client.get("/api/query", params=params)
        r.raise_for_status()
        return self._parse_feed(r.text)

    def _parse_feed(self, xml_text: str) -> tuple[list[ContentItem], int]:
        root = ET.fromstring(xml_text)
        items: list[ContentItem] = []
        for entry in root.findall("atom:entry", _NS):
            title = _strip(entry.findtext("atom:title", default="", namespaces=_NS)) or ""
            abstract = _strip(entry.findtext("atom:summary", default=None, namespaces=_NS)) or ""
            id_url = entry.findtext("atom:id", default="", namespaces=_NS)
            arxiv_id = _arxiv_id_from_id_url(id_url)
            doi = entry.findtext("arxiv:doi", default=None, namespaces=_NS)

            published = entry.findtext("atom:published", default=None, namespaces=_NS)
            published_at: datetime | None = None
            if published:
                try:
                    published_at = datetime.fromisoformat(published.replace("Z", "+00:00")).astimezone(UTC)
                except ValueError:
                    pass

            authors = []
            for a in entry.findall("atom:author", _NS):
                name = _strip(a.findtext("atom:name", default="", namespaces=_NS)) or ""
                if name:
                    authors.append(name)

            pdf_url = None
            for link in entry.findall("atom:link", _NS):
                if link.attrib.get("title") == "pdf":
                    pdf_url = link.attrib.get("href")

            tags = [c.attrib["term"] for c in entry.findall("atom:category", _NS) if c.attrib.get("term")]

            item_id = paper_item_id(doi=doi, arxiv_id=arxiv_id) or id_url
            if not item_id:
                continue
            items.append(
                paper_item(
                    item_id=item_id,
                    source=self.source,
                    title=title,
                    abstract=abstract,
                    url=id_url or None,
                    authors=authors,
                    published=published_at,
                    tags=tags,
                    extra={"arxiv_id": arxiv_id, "doi": doi, "pdf_url": pdf_url},
                )
            )

        total_text = root.findtext("opensearch:totalResults", default=None, namespaces=_NS)
        total = int(total_text) if total_text and total_text.strip().isdigit() else len(items)
        return items, total
