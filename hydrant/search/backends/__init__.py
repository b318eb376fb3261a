"""
Reference collaborators: httpx Solr transport and SQLAlchemy entity loader.
"""

from __future__ import annotations

from .solr import HttpSolrTransport
from .sql import SQLAlchemyEntityLoader

__all__ = ["HttpSolrTransport", "SQLAlchemyEntityLoader"]
