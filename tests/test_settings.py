"""Tests for environment driven configuration."""

from knowledge_curator.linking import LinkingOptions, LinkType
from knowledge_curator.models import SourceConfig
from knowledge_curator.settings import CuratorSettings, settings


class TestSettings:
    def test_defaults(self):
        s = CuratorSettings()
        assert s.default_max_results == 10
        assert s.default_timeout_ms == 5000
        assert s.generic_sources == ["web"]
        assert s.min_link_strength == 0.3
        assert s.relation_rules_path is None

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("KNOWLEDGE_CURATOR_DEFAULT_TIMEOUT_MS", "1234")
        monkeypatch.setenv("KNOWLEDGE_CURATOR_GENERIC_SOURCES", '["web", "forum"]')
        s = CuratorSettings()
        assert s.default_timeout_ms == 1234
        assert s.generic_sources == ["web", "forum"]

    def test_source_config_defaults_follow_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "default_timeout_ms", 777)
        assert SourceConfig().timeout_ms == 777

    def test_linking_options_from_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "max_links_per_content", 4)
        opts = LinkingOptions.from_settings(link_types=["similar"])
        assert opts.max_links_per_content == 4
        assert opts.link_types == frozenset({LinkType.SIMILAR})
