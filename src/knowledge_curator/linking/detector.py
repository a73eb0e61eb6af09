"""
Relationship detection between a new content item and the existing node set.

Four independent candidate sets are computed per pair (similarity, dependency,
hierarchy, temporal), then filtered, mirrored, sorted and capped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..models import ContentItem
from ..settings import settings
from .models import KnowledgeLink, LinkingOptions, LinkType
from .rules import RelationRule, RelationRuleSet, default_rule_set
from .similarity import TextProfile, TfidfIndex, content_similarity, tag_overlap

logger = logging.getLogger(__name__)

TAG_OVERLAP_THRESHOLD = 0.3
CONTENT_SIMILARITY_THRESHOLD = 0.4
SAME_SOURCE_STRENGTH = 0.5
LEARNING_STRENGTH = 0.6
VERSION_STRENGTH = 0.5


class RelationshipDetector:
    def __init__(self, rules: RelationRuleSet | None = None, *, generic_sources: Iterable[str] | None = None):
        self.rules = rules or default_rule_set()
        self.generic_sources = frozenset(generic_sources if generic_sources is not None else settings.generic_sources)
        self._dependency_rules = self.rules.of_kind("dependency")
        self._hierarchy_rules = self.rules.of_kind("hierarchy")
        self._profiles: dict[str, TextProfile] = {}

    def profile(self, item: ContentItem) -> TextProfile:
        cached = self._profiles.get(item.id)
        if cached is not None and cached.item is item:
            return cached
        prof = TextProfile.of(item)
        self._profiles[item.id] = prof
        return prof

    def forget(self) -> None:
        self._profiles.clear()

    def detect(
        self,
        new_item: ContentItem,
        existing: Iterable[ContentItem],
        options: LinkingOptions,
    ) -> list[KnowledgeLink]:
        """Links between `new_item` and every other item in `existing`.

        The result is the strongest prefix of the sorted candidates that fits
        in `max_links_per_content`. A bidirectional link and its mirror are
        kept or dropped together, and the cut stops at the first pair that
        does not fit.
        """
        new = self.profile(new_item)
        others = [item for item in existing if item.id != new_item.id]
        tfidf = TfidfIndex({**{item.id: item.content for item in others}, new_item.id: new_item.content})
        groups: list[list[KnowledgeLink]] = []
        for item in others:
            for link in self.candidates(new, self.profile(item), tfidf):
                if not options.allows(link):
                    continue
                group = [link]
                if options.enable_bidirectional and link.bidirectional:
                    group.append(link.mirrored())
                groups.append(group)

        groups.sort(key=lambda g: g[0].strength, reverse=True)
        out: list[KnowledgeLink] = []
        for group in groups:
            if len(out) + len(group) > options.max_links_per_content:
                break
            out.extend(group)
        total = sum(len(g) for g in groups)
        if len(out) < total:
            logger.debug("Capped links for %s: kept %d of %d", new_item.id, len(out), total)
        return out

    def candidates(self, a: TextProfile, b: TextProfile, tfidf: TfidfIndex | None = None) -> list[KnowledgeLink]:
        return [
            *self.similarity_links(a, b, tfidf),
            *self.dependency_links(a, b),
            *self.hierarchy_links(a, b),
            *self.temporal_links(a, b),
        ]

    def similarity_links(
        self, a: TextProfile, b: TextProfile, tfidf: TfidfIndex | None = None
    ) -> list[KnowledgeLink]:
        links: list[KnowledgeLink] = []
        ia, ib = a.item, b.item

        score, common = tag_overlap(ia.tags, ib.tags)
        if score > TAG_OVERLAP_THRESHOLD:
            links.append(
                KnowledgeLink(ia.id, ib.id, LinkType.SIMILAR, score, f"Shared topics: {', '.join(common)}", True)
            )

        sim = content_similarity(a, b, tfidf)
        if sim.score > CONTENT_SIMILARITY_THRESHOLD:
            links.append(
                KnowledgeLink(
                    ia.id,
                    ib.id,
                    LinkType.SIMILAR,
                    sim.score,
                    f"Similar content: {', '.join(sim.common_concepts)}",
                    True,
                )
            )

        if ia.source == ib.source and ia.source not in self.generic_sources:
            links.append(
                KnowledgeLink(ia.id, ib.id, LinkType.RELATED, SAME_SOURCE_STRENGTH, f"Same source: {ia.source}", True)
            )
        return links

    def dependency_links(self, a: TextProfile, b: TextProfile) -> list[KnowledgeLink]:
        links: list[KnowledgeLink] = []
        for rule in self._dependency_rules:
            for src, dst in ((a, b), (b, a)):
                if self._matches(src, rule.from_term, rule) and self._matches(dst, rule.to_term, rule):
                    links.append(
                        KnowledgeLink(src.item.id, dst.item.id, LinkType.DEPENDENCY, rule.strength, rule.describe())
                    )

        for src, dst in ((a, b), (b, a)):
            if self._any_mention(src, self.rules.beginner_terms) and self._any_mention(dst, self.rules.advanced_terms):
                links.append(
                    KnowledgeLink(
                        src.item.id,
                        dst.item.id,
                        LinkType.DEPENDENCY,
                        LEARNING_STRENGTH,
                        "Learning progression: beginner → advanced",
                    )
                )
        return links

    def hierarchy_links(self, a: TextProfile, b: TextProfile) -> list[KnowledgeLink]:
        links: list[KnowledgeLink] = []
        for rule in self._hierarchy_rules:
            for parent, child in ((a, b), (b, a)):
                if self._matches(parent, rule.from_term, rule) and self._matches(child, rule.to_term, rule):
                    links.append(
                        KnowledgeLink(
                            parent.item.id, child.item.id, LinkType.HIERARCHY, rule.strength, rule.describe()
                        )
                    )
        return links

    def temporal_links(self, a: TextProfile, b: TextProfile) -> list[KnowledgeLink]:
        # Both titles carry a version number; no ordering is implied.
        if not a.versions or not b.versions:
            return []
        return [
            KnowledgeLink(
                a.item.id,
                b.item.id,
                LinkType.TEMPORAL,
                VERSION_STRENGTH,
                f"Version relationship detected ({a.versions[0]} / {b.versions[0]})",
            )
        ]

    @staticmethod
    def _matches(profile: TextProfile, term: str, rule: RelationRule) -> bool:
        if rule.scope == "title":
            return profile.title_mentions(term)
        return profile.mentions(term)

    @staticmethod
    def _any_mention(profile: TextProfile, terms: Iterable[str]) -> bool:
        return any(profile.mentions(t) for t in terms)
