"""Tests for relation rule loading."""

import json

import pytest

from knowledge_curator.errors import RelationRulesError
from knowledge_curator.linking import RelationRuleSet, default_rule_set, load_relation_rules
from knowledge_curator.linking.rules import DEFAULT_ADVANCED_TERMS, DEFAULT_RULES
from knowledge_curator.settings import settings


class TestRelationRules:
    def test_load_from_json(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(
            json.dumps(
                {
                    "rules": [
                        {"from": "svelte", "to": "javascript", "strength": 0.8, "kind": "dependency"},
                        {"from": "svelte", "to": "sveltekit", "strength": 0.7, "kind": "hierarchy"},
                    ],
                    "beginner_terms": ["intro"],
                }
            )
        )

        rule_set = load_relation_rules(path)

        assert [r.from_term for r in rule_set.rules] == ["svelte", "svelte"]
        assert [r.kind for r in rule_set.of_kind("hierarchy")] == ["hierarchy"]
        assert rule_set.beginner_terms == ("intro",)
        assert rule_set.advanced_terms == DEFAULT_ADVANCED_TERMS
        assert rule_set.rules[0].describe() == "svelte depends on javascript"
        assert rule_set.rules[1].describe() == "sveltekit is part of svelte ecosystem"

    def test_invalid_strength(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"rules": [{"from": "a", "to": "b", "strength": 2, "kind": "dependency"}]}))
        with pytest.raises(RelationRulesError):
            load_relation_rules(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(RelationRulesError):
            load_relation_rules(tmp_path / "nope.json")

    def test_defaults(self):
        rule_set = RelationRuleSet()
        assert rule_set.rules == DEFAULT_RULES
        js_ts = [r for r in rule_set.of_kind("hierarchy") if r.from_term == "javascript"]
        assert len(js_ts) == 1
        assert js_ts[0].strength == 0.8
        assert js_ts[0].scope == "title"

    def test_default_rule_set_reads_settings_path(self, tmp_path, monkeypatch):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"rules": []}))
        monkeypatch.setattr(settings, "relation_rules_path", str(path))

        assert default_rule_set().rules == ()
