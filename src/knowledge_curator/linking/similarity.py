from __future__ import annotations

import re
from dataclasses import dataclass, field
from difflib import SequenceMatcher

from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity

from ..models import ContentItem
from ..text import extract_concepts, extract_keywords, jaccard, stemmed_tokens, string_similarity, tokenize

# Weights of the combined content similarity.
W_STRING = 0.3
W_KEYWORD = 0.3
W_TFIDF = 0.2
W_CONCEPT = 0.2

FUZZY_MENTION_THRESHOLD = 0.7
# Short words overlap too easily ('create' vs 'react'), so fuzzy matching needs
# both sides this long and of comparable length.
FUZZY_MIN_LENGTH = 6
FUZZY_LENGTH_RATIO = 0.8
VERSION_RE = re.compile(r"v?(\d+)\.(\d+)")


@dataclass(slots=True)
class TextProfile:
    """Per-item text features, computed once and reused across comparisons."""

    item: ContentItem
    blob: str
    title: str
    stems: set[str]
    title_stems: set[str]
    keywords: list[str]
    concepts: list[str]
    versions: list[str] = field(default_factory=list)

    @classmethod
    def of(cls, item: ContentItem) -> TextProfile:
        title = item.title.lower()
        return cls(
            item=item,
            blob=item.text_blob,
            title=title,
            stems=stemmed_tokens(item.text_blob),
            title_stems=stemmed_tokens(title),
            keywords=extract_keywords(item.content),
            concepts=extract_concepts(f"{item.title} {item.content}"),
            versions=[f"{a}.{b}" for a, b in VERSION_RE.findall(item.title)],
        )

    def mentions(self, term: str) -> bool:
        """Exact substring, stemmed-token match, or a close long concept (> 0.7)."""
        term = term.lower().strip()
        if not term:
            return False
        if term in self.blob:
            return True
        term_stems = stemmed_tokens(term)
        if term_stems and term_stems <= self.stems:
            return True
        return any(_fuzzy_match(term, c) for c in self.concepts)

    def title_mentions(self, term: str) -> bool:
        term = term.lower().strip()
        if not term:
            return False
        if term in self.title:
            return True
        term_stems = stemmed_tokens(term)
        return bool(term_stems) and term_stems <= self.title_stems


def _fuzzy_match(term: str, concept: str) -> bool:
    shorter, longer = sorted((len(term), len(concept)))
    if shorter < FUZZY_MIN_LENGTH or shorter / longer < FUZZY_LENGTH_RATIO:
        return False
    return SequenceMatcher(None, term, concept).ratio() > FUZZY_MENTION_THRESHOLD


@dataclass(frozen=True, slots=True)
class ContentSimilarity:
    score: float
    common_concepts: list[str]
    string: float = 0.0
    keyword: float = 0.0
    tfidf: float = 0.0
    concept: float = 0.0


def tag_overlap(tags1: list[str], tags2: list[str]) -> tuple[float, list[str]]:
    return jaccard(tags1, tags2)


class TfidfIndex:
    """TF-IDF vectors fitted once over a set of documents keyed by item id.

    Document frequencies come from the whole set, so terms shared by every
    document weigh less than terms shared by only a few.
    """

    def __init__(self, texts: dict[str, str]):
        self._rows: dict[str, int] = {}
        self._matrix = None
        ids = [key for key, text in texts.items() if tokenize(text)]
        if not ids:
            return
        try:
            self._matrix = TfidfVectorizer(stop_words="english").fit_transform([texts[key] for key in ids])
        except ValueError:
            # empty vocabulary after stop-word removal
            return
        self._rows = {key: row for row, key in enumerate(ids)}

    def __contains__(self, key: str) -> bool:
        return key in self._rows

    def cosine(self, id1: str, id2: str) -> float:
        r1, r2 = self._rows.get(id1), self._rows.get(id2)
        if r1 is None or r2 is None:
            return 0.0
        return float(cosine_similarity(self._matrix[r1], self._matrix[r2])[0, 0])


def tfidf_cosine(text1: str, text2: str) -> float:
    """Cosine of two texts with IDF fitted on just the pair."""
    if not tokenize(text1) or not tokenize(text2):
        return 0.0
    vectorizer = TfidfVectorizer(stop_words="english")
    try:
        matrix = vectorizer.fit_transform([text1, text2])
    except ValueError:
        # empty vocabulary after stop-word removal
        return 0.0
    return float(cosine_similarity(matrix[0], matrix[1])[0, 0])


def content_similarity(a: TextProfile, b: TextProfile, tfidf: TfidfIndex | None = None) -> ContentSimilarity:
    text1, text2 = a.item.content, b.item.content
    if not text1.strip() or not text2.strip():
        return ContentSimilarity(score=0.0, common_concepts=[])

    s_string = string_similarity(text1, text2)
    s_keyword, common_keywords = jaccard(a.keywords, b.keywords)
    if tfidf is not None:
        s_tfidf = tfidf.cosine(a.item.id, b.item.id)
    else:
        s_tfidf = tfidf_cosine(text1, text2)
    s_concept, common_concepts = jaccard(a.concepts, b.concepts)

    score = W_STRING * s_string + W_KEYWORD * s_keyword + W_TFIDF * s_tfidf + W_CONCEPT * s_concept
    shared = list(dict.fromkeys(common_keywords + common_concepts))
    return ContentSimilarity(
        score=max(0.0, min(1.0, score)),
        common_concepts=shared[:10],
        string=s_string,
        keyword=s_keyword,
        tfidf=s_tfidf,
        concept=s_concept,
    )
