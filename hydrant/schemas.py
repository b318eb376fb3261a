"""
Pydantic models describing the raw engine response.

Only the structure Hydrant consumes is modelled; unknown keys are kept
(`extra="allow"`) so engine-specific sections pass through untouched.

- Documents + numFound ("response" section)
- Facet counts: flat facet_fields and bucketed facet_dates
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------- Shared types ----------------

JSONScalar = Union[str, int, float, bool, None]


# ---------------- Documents ----------------

class RawDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    class_name: Optional[str] = None
    primary_key: Optional[str] = None

    @field_validator("id", "primary_key", mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> Any:
        # Some engines return numeric ids for single-class cores
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class ResponseSection(BaseModel):
    model_config = ConfigDict(extra="allow")

    docs: List[RawDocument] = Field(default_factory=list)
    numFound: Optional[int] = None


# ---------------- Facets ----------------

class FacetCounts(BaseModel):
    model_config = ConfigDict(extra="allow")

    facet_fields: Dict[str, List[JSONScalar]] = Field(default_factory=dict)
    facet_dates: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


# ---------------- Envelope ----------------

class SearchResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    response: Optional[ResponseSection] = None
    facet_counts: Optional[FacetCounts] = None
