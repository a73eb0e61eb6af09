from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable
from difflib import SequenceMatcher

from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

_WHITESPACE_RE = re.compile(r"\s+")
_TOKEN_RE = re.compile(r"[a-z0-9][a-z0-9+#]*")
_TECH_TERM_RE = re.compile(r"\b[A-Z][a-zA-Z]{3,}\b")
_VOWEL_RE = re.compile(r"[aeiouy]")

# SequenceMatcher is quadratic in the worst case; compare prefixes only.
_MAX_COMPARE_CHARS = 2000

COMMON_CONCEPTS = (
    "api",
    "database",
    "component",
    "function",
    "class",
    "method",
    "interface",
    "framework",
    "library",
    "service",
    "module",
    "package",
    "dependency",
    "authentication",
    "authorization",
    "middleware",
    "routing",
    "testing",
    "deployment",
    "performance",
    "security",
    "optimization",
    "caching",
)


def normalize_text(text: str) -> str:
    """Normalization used before tokenizing and comparing.

    Keeps meaning but removes irrelevant variance.
    """
    if not text:
        return ""
    text = unicodedata.normalize("NFKC", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


def tokenize(text: str) -> list[str]:
    return _TOKEN_RE.findall(normalize_text(text).lower())


def stem(token: str) -> str:
    """Cheap suffix stripper (plural and -ing/-ed forms only).

    Deterministic and good enough for matching "hooks" with "hook" or
    "testing" with "test"; not a linguistic stemmer.
    """
    t = token.lower()
    if len(t) <= 3:
        return t
    if t.endswith("sses"):
        t = t[:-2]
    elif t.endswith("ies"):
        t = t[:-3] + "y"
    elif t.endswith("s") and not t.endswith(("ss", "us", "is")):
        t = t[:-1]

    for suf in ("ingly", "edly", "ing", "ed"):
        base = t[: -len(suf)]
        if t.endswith(suf) and len(base) >= 3 and _VOWEL_RE.search(base):
            t = base
            if t.endswith(("at", "bl", "iz")):
                t += "e"
            elif t[-1] == t[-2] and t[-1] not in "lsz":
                t = t[:-1]
            break
    return t


def stemmed_tokens(text: str) -> set[str]:
    return {stem(t) for t in tokenize(text)}


def extract_keywords(text: str, *, max_k: int = 10) -> list[str]:
    """Capitalized technical terms plus known programming concepts, first-seen order."""
    if not text:
        return []
    terms = _TECH_TERM_RE.findall(text)
    lower = text.lower()
    terms.extend(c for c in COMMON_CONCEPTS if c in lower)
    seen: set[str] = set()
    out: list[str] = []
    for t in terms:
        if t in seen:
            continue
        seen.add(t)
        out.append(t)
    return out[:max_k]


def extract_concepts(text: str, *, max_k: int = 12) -> list[str]:
    # Frequency ranked stems; ties keep first occurrence.
    freq: dict[str, int] = {}
    for tok in tokenize(text):
        if len(tok) < 4 or tok in ENGLISH_STOP_WORDS:
            continue
        s = stem(tok)
        freq[s] = freq.get(s, 0) + 1
    ranked = sorted(freq.items(), key=lambda kv: kv[1], reverse=True)
    return [k for k, _ in ranked[:max_k]]


def jaccard(a: Iterable[str], b: Iterable[str]) -> tuple[float, list[str]]:
    """Jaccard overlap of two lowercase term sets, with the shared terms."""
    left = [x.lower() for x in a]
    set_a = set(left)
    set_b = {x.lower() for x in b}
    union = set_a | set_b
    if not union:
        return 0.0, []
    common: list[str] = []
    for x in left:
        if x in set_b and x not in common:
            common.append(x)
    return len(common) / len(union), common


def string_similarity(a: str, b: str) -> float:
    a = normalize_text(a).lower()[:_MAX_COMPARE_CHARS]
    b = normalize_text(b).lower()[:_MAX_COMPARE_CHARS]
    if not a or not b:
        return 0.0
    return SequenceMatcher(None, a, b).ratio()
