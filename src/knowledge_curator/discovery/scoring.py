from __future__ import annotations

from dataclasses import dataclass, field

from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

from ..models import ContentItem
from ..text import stem, stemmed_tokens, string_similarity, tokenize


def query_terms(query: str) -> list[str]:
    """Stemmed, stop-word free query terms (len > 2)."""
    terms = [stem(t) for t in tokenize(query) if len(t) > 2 and t not in ENGLISH_STOP_WORDS]
    return list(dict.fromkeys(terms))


@dataclass
class KeywordRelevanceScorer:
    """Lexical relevance heuristic used when no external scorer is injected.

    score = 0.4 * title match + 0.3 * content match + 0.2 * tag match
            + 0.1 * source reliability hint
    """

    source_reliability: dict[str, float] = field(default_factory=dict)
    default_reliability: float = 0.5

    def score(self, item: ContentItem, query: str) -> float:
        terms = query_terms(query)
        if not terms:
            return 0.0

        title = self._title_match(item.title, query, terms)
        content = self._content_match(item.content, terms)
        tags = self._tag_match(item.tags, terms)
        reliability = self.source_reliability.get(item.source, self.default_reliability)

        s = title * 0.4 + content * 0.3 + tags * 0.2 + reliability * 0.1
        return max(0.0, min(1.0, s))

    @staticmethod
    def _title_match(title: str, query: str, terms: list[str]) -> float:
        if not title:
            return 0.0
        stems = stemmed_tokens(title)
        hits = sum(1 for t in terms if t in stems)
        exact = 1.0 if query.strip().lower() in title.lower() else 0.0
        fuzzy = string_similarity(title, query)
        return min(1.0, 0.5 * hits / len(terms) + 0.3 * exact + 0.2 * fuzzy)

    @staticmethod
    def _content_match(content: str, terms: list[str]) -> float:
        tokens = [stem(t) for t in tokenize(content)]
        if not tokens:
            return 0.0
        matched = sum(1 for tok in tokens if tok in terms)
        coverage = sum(1 for t in terms if t in tokens) / len(terms)
        # ~5% term density saturates the density half
        density = min(1.0, (matched / len(tokens)) * 20)
        return 0.5 * coverage + 0.5 * density

    @staticmethod
    def _tag_match(tags: list[str], terms: list[str]) -> float:
        if not tags:
            return 0.0
        stems: set[str] = set()
        for tag in tags:
            stems |= stemmed_tokens(tag)
        return sum(1 for t in terms if t in stems) / len(terms)
