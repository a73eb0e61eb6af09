"""
Relation rules for the dependency and hierarchy detectors.

Rules are plain records so new technology relationships can be added from a
JSON file instead of code:

    {
      "rules": [
        {"from": "svelte", "to": "javascript", "strength": 0.8, "kind": "dependency"},
        {"from": "svelte", "to": "sveltekit", "strength": 0.7, "kind": "hierarchy"}
      ],
      "beginner_terms": ["beginner", "introduction"],
      "advanced_terms": ["advanced", "deep dive"]
    }
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import RelationRulesError
from ..settings import settings

logger = logging.getLogger(__name__)

RuleKind = Literal["dependency", "hierarchy"]


class RelationRule(BaseModel):
    """`from_term` depends on / is the parent of `to_term`.

    scope "content" matches title, body and tags; "title" matches titles only.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_term: str = Field(alias="from", min_length=1)
    to_term: str = Field(alias="to", min_length=1)
    strength: float = Field(ge=0.0, le=1.0)
    kind: RuleKind
    scope: Literal["content", "title"] = "content"
    reason: str | None = None

    def describe(self) -> str:
        if self.reason:
            return self.reason
        if self.kind == "dependency":
            return f"{self.from_term} depends on {self.to_term}"
        return f"{self.to_term} is part of {self.from_term} ecosystem"


def _dep(a: str, b: str, s: float) -> RelationRule:
    return RelationRule(from_term=a, to_term=b, strength=s, kind="dependency")


def _framework(parent: str, child: str) -> RelationRule:
    return RelationRule(from_term=parent, to_term=child, strength=0.7, kind="hierarchy")


def _topic(parent: str, child: str) -> RelationRule:
    return RelationRule(
        from_term=parent,
        to_term=child,
        strength=0.7,
        kind="hierarchy",
        scope="title",
        reason=f"{child} is a subtopic of {parent}",
    )


DEFAULT_RULES: tuple[RelationRule, ...] = (
    # Frontend
    _dep("react", "javascript", 0.8),
    _dep("vue", "javascript", 0.8),
    _dep("angular", "typescript", 0.9),
    _dep("nextjs", "react", 0.9),
    _dep("nuxt", "vue", 0.9),
    # Backend
    _dep("express", "nodejs", 0.9),
    _dep("nestjs", "nodejs", 0.8),
    _dep("fastify", "nodejs", 0.8),
    # Databases
    _dep("mongoose", "mongodb", 0.9),
    _dep("prisma", "database", 0.7),
    _dep("typeorm", "database", 0.7),
    # Framework -> library
    _framework("react", "redux"),
    _framework("react", "react router"),
    _framework("vue", "vuex"),
    _framework("angular", "rxjs"),
    _framework("nodejs", "express"),
    # Topic -> subtopic
    _topic("web development", "frontend"),
    _topic("web development", "backend"),
    _topic("machine learning", "deep learning"),
    _topic("machine learning", "neural network"),
    _topic("devops", "kubernetes"),
    _topic("database", "sql"),
    RelationRule(
        from_term="javascript",
        to_term="typescript",
        strength=0.8,
        kind="hierarchy",
        scope="title",
        reason="TypeScript extends JavaScript",
    ),
)

DEFAULT_BEGINNER_TERMS = ("beginner", "basics", "introduction", "getting started", "fundamentals")
DEFAULT_ADVANCED_TERMS = ("advanced", "expert", "deep dive", "best practices", "optimization")


class RelationRuleSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    rules: tuple[RelationRule, ...] = DEFAULT_RULES
    beginner_terms: tuple[str, ...] = DEFAULT_BEGINNER_TERMS
    advanced_terms: tuple[str, ...] = DEFAULT_ADVANCED_TERMS

    def of_kind(self, kind: RuleKind) -> list[RelationRule]:
        return [r for r in self.rules if r.kind == kind]


def load_relation_rules(path: str | Path) -> RelationRuleSet:
    p = Path(path).expanduser()
    try:
        raw = p.read_text(encoding="utf-8")
        rule_set = RelationRuleSet.model_validate_json(raw)
    except (OSError, ValidationError) as e:
        raise RelationRulesError(f"Invalid relation rules in {p}: {e}") from e
    logger.info("Loaded %d relation rules from %s", len(rule_set.rules), p)
    return rule_set


def default_rule_set() -> RelationRuleSet:
    """Rules from KNOWLEDGE_CURATOR_RELATION_RULES_PATH, or the built-ins."""
    if settings.relation_rules_path:
        return load_relation_rules(settings.relation_rules_path)
    return RelationRuleSet()
