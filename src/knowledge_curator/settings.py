from __future__ import annotations

from pydantic import Field

try:
    from pydantic_settings import BaseSettings, SettingsConfigDict
except Exception as e:  # pragma: no cover
    raise RuntimeError(
        "pydantic-settings is required. Install with: pip install pydantic-settings"
    ) from e


class CuratorSettings(BaseSettings):
    """Unified configuration for the curator.

    Environment variables are prefixed with KNOWLEDGE_CURATOR_.
    """

    model_config = SettingsConfigDict(env_prefix="KNOWLEDGE_CURATOR_", extra="ignore")

    # --- Discovery ---
    default_max_results: int = Field(default=10, ge=1, description="Per-source cap when the caller gives none")
    default_timeout_ms: int = Field(default=5000, gt=0)
    default_reliability_weight: float = Field(default=0.5, ge=0.0, le=1.0)

    # Sources too broad to imply a relationship between two of their items.
    generic_sources: list[str] = Field(default_factory=lambda: ["web"])

    # --- Linking ---
    min_link_strength: float = Field(default=0.3, ge=0.0, le=1.0)
    max_links_per_content: int = Field(default=10, ge=0)
    enable_bidirectional: bool = True
    relation_rules_path: str | None = Field(
        default=None, description="JSON file with dependency/hierarchy rules; built-ins when unset"
    )

    # --- Connectors ---
    semantic_scholar_api_key: str | None = None
    crossref_mailto: str | None = None


settings = CuratorSettings()
