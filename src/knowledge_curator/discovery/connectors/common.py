from __future__ import annotations

import re
from datetime import datetime
from typing import Any

import httpx

from ...http import HttpClientFactory
from ...models import ContentItem, ContentMetadata

_MARKUP_RE = re.compile(r"<[^>]+>")


def paper_item_id(*, doi: str | None = None, arxiv_id: str | None = None, s2_id: str | None = None) -> str | None:
    """Stable id for a paper.

    Priority:
    1) DOI (normalized, lowercase)
    2) arXiv
    3) Semantic Scholar paperId
    """
    if doi:
        return f"doi:{doi.lower()}"
    if arxiv_id:
        return f"arxiv:{arxiv_id}"
    if s2_id:
        return f"s2:{s2_id}"
    return None


def strip_markup(text: str | None) -> str:
    # Crossref abstracts arrive as JATS XML fragments.
    if not text:
        return ""
    return re.sub(r"\s+", " ", _MARKUP_RE.sub(" ", text)).strip()


def paper_item(
    *,
    item_id: str,
    source: str,
    title: str,
    abstract: str,
    url: str | None,
    authors: list[str],
    published: datetime | None,
    tags: list[str],
    extra: dict[str, Any],
) -> ContentItem:
    return ContentItem(
        id=item_id,
        title=title,
        url=url,
        content=abstract,
        source=source,
        tags=tags,
        metadata=ContentMetadata(
            author=", ".join(authors) if authors else None,
            publish_date=published,
            word_count=len(abstract.split()) if abstract else 0,
            content_type="paper",
            extra=extra,
        ),
    )


class HttpConnector:
    """Base for connectors backed by one shared httpx client."""

    source: str = "web"

    def __init__(
        self,
        *,
        base_url: str,
        headers: dict | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = HttpClientFactory.client(base_url=base_url, headers=headers, transport=transport)

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()
