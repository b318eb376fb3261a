"""
Query descriptor consumed by the decoder.

The query-building DSL lives elsewhere; what Hydrant needs from it is which
facets were requested (with their declared types, namespaces, date ranges
and referenced entity classes) and whether a page was asked for. `params`
is the opaque engine parameter mapping, passed through to the transport.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from ..config import FieldType


@dataclass(frozen=True)
class TimeRange:
    """Half-open time interval [start, end); value of a date-range facet row."""

    start: datetime
    end: datetime

    def __contains__(self, moment: datetime) -> bool:
        return self.start <= moment < self.end

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


@dataclass(frozen=True)
class FacetRequest:
    name: str
    field_type: FieldType = FieldType.string
    namespace: Optional[str] = None
    time_range: Optional[TimeRange] = None
    # Entity class name the facet values point at (foreign-key style facets)
    reference: Optional[str] = None

    @property
    def key(self) -> Tuple[Optional[str], str]:
        return (self.namespace, self.name)


@dataclass
class SearchQuery:
    types: List[str] = field(default_factory=list)
    page: Optional[int] = None
    per_page: Optional[int] = None
    facets: List[FacetRequest] = field(default_factory=list)
    params: Dict[str, Any] = field(default_factory=dict)

    @property
    def paginated(self) -> bool:
        return self.page is not None or self.per_page is not None

    def facet(self, name: str, namespace: Optional[str] = None) -> Optional[FacetRequest]:
        for req in self.facets:
            if req.name == name and req.namespace == namespace:
                return req
        return None
