from .arxiv import ArxivConnector
from .crossref import CrossrefConnector
from .semantic_scholar import SemanticScholarConnector
from .static import StaticConnector

__all__ = ["ArxivConnector", "CrossrefConnector", "SemanticScholarConnector", "StaticConnector"]
