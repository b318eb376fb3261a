"""
Search result decoding: field-name codec, value coercion, facet and result
decoding, pagination, batched hydration and the ResultSet that ties them
together.
"""

from __future__ import annotations

from .coercion import ValueCoercer
from .facets import FacetField, FacetRow, FacetSet, decode_facets
from .fields import FieldName, FieldNameCodec
from .hydration import Hydrator
from .interfaces import EntityLoader, Transport
from .pagination import PaginatedList, paginate
from .query import FacetRequest, SearchQuery, TimeRange
from .result_set import ResultSet
from .results import RawReference, decode_results
from .session import SearchSession

__all__ = [
    "EntityLoader",
    "FacetField",
    "FacetRequest",
    "FacetRow",
    "FacetSet",
    "FieldName",
    "FieldNameCodec",
    "Hydrator",
    "PaginatedList",
    "RawReference",
    "ResultSet",
    "SearchQuery",
    "SearchSession",
    "TimeRange",
    "Transport",
    "ValueCoercer",
    "decode_facets",
    "decode_results",
    "paginate",
]
