from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..errors import UnknownSourceError
from ..models import SourceConfig
from .base import SourceConnector

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RegisteredSource:
    source: str
    connector: SourceConnector
    config: SourceConfig


class SourceRegistry:
    """Holds connector + config per source id, in registration order."""

    def __init__(self) -> None:
        self._sources: dict[str, RegisteredSource] = {}

    def __len__(self) -> int:
        return len(self._sources)

    def __contains__(self, source: str) -> bool:
        return source in self._sources

    def register_source(self, source: str, connector: SourceConnector, config: SourceConfig | None = None) -> None:
        logger.debug("Registering source: %s", source)
        self._sources[source] = RegisteredSource(source, connector, config or SourceConfig())

    def unregister_source(self, source: str) -> None:
        logger.debug("Unregistering source: %s", source)
        self._sources.pop(source, None)

    def get_available_sources(self) -> list[str]:
        return list(self._sources)

    def get_source_config(self, source: str) -> SourceConfig | None:
        entry = self._sources.get(source)
        return entry.config.model_copy() if entry else None

    def update_source_config(self, source: str, *, strict: bool = False, **changes: Any) -> SourceConfig | None:
        """Partially merge `changes` into a source's config.

        Unknown sources are ignored unless `strict` is set.
        """
        entry = self._sources.get(source)
        if entry is None:
            if strict:
                raise UnknownSourceError(source)
            return None
        cfg = entry.config.merged(**changes)
        self._sources[source] = RegisteredSource(source, entry.connector, cfg)
        logger.debug("Updated config for source %s: %s", source, changes)
        return cfg.model_copy()

    def enabled_sources(self, only: list[str] | None = None) -> list[RegisteredSource]:
        """Snapshot of enabled sources, optionally restricted to `only`."""
        wanted = set(only) if only else None
        return [
            e
            for e in self._sources.values()
            if e.config.enabled and (wanted is None or e.source in wanted)
        ]
