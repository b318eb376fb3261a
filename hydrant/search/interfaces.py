"""
Search interfaces (protocols) for pluggable collaborators.

These define the minimal contract the decoder relies on. Reference
implementations live under `backends/` (httpx transport, SQLAlchemy loader).
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence

from .query import SearchQuery


class Transport(Protocol):
    """Executes a query against the search engine and returns the raw JSON body."""

    def execute(self, query: SearchQuery) -> Mapping[str, Any]:
        ...


class EntityLoader(Protocol):
    """Batched lookup of persisted entities by primary key."""

    def load_all(self, class_name: str, primary_keys: Sequence[str]) -> Sequence[Any]:
        """
        Return the entities of `class_name` whose keys are in `primary_keys`,
        in any order. Keys with no entity are simply absent from the result.
        """
        ...

    def primary_key(self, entity: Any) -> str:
        """String form of the entity's primary key, as it appears in the index."""
        ...
