from __future__ import annotations


class CuratorError(Exception):
    """Base class for errors raised by knowledge_curator."""


class NoEnabledSourcesError(CuratorError):
    """Aggregation cannot start because no candidate source is enabled."""

    def __init__(self, message: str = "No enabled sources available for discovery"):
        super().__init__(message)


class SourceError(CuratorError):
    """A single source failed. Recovered by the coordinator, never propagated."""

    kind = "error"

    def __init__(self, source: str, message: str):
        super().__init__(message)
        self.source = source


class SourceTimeoutError(SourceError):
    kind = "timeout"

    def __init__(self, source: str, timeout_ms: int):
        super().__init__(source, f"Timeout for source {source} after {timeout_ms}ms")
        self.timeout_ms = timeout_ms


class SourceCallError(SourceError):
    kind = "call"

    def __init__(self, source: str, cause: BaseException):
        msg = str(cause) or type(cause).__name__
        super().__init__(source, msg)
        self.cause = cause


class UnknownSourceError(CuratorError, KeyError):
    def __init__(self, source: str):
        super().__init__(f"Unknown source: {source}")
        self.source = source

    def __str__(self) -> str:
        return str(self.args[0])


class RelationRulesError(CuratorError):
    """A relation rule file could not be read or validated."""
