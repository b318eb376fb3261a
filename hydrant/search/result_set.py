"""
ResultSet: the object handed back to application code for one search.

    rs = ResultSet(raw_response, query, loader)
    rs.raw_results   # ordered RawReference list, never loads entities
    rs.total         # engine match count
    rs.results       # hydrated entities, same order, one fetch per class
    rs.facet("blog_id").rows[0].instance

Construction validates and decodes the whole response; a malformed shape
raises MalformedResponseError immediately.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from ..config import Settings, settings as default_settings
from ..errors import (
    FacetNotRequestedError,
    HydrantError,
    MalformedResponseError,
    UnknownFieldTypeError,
)
from ..schemas import SearchResponse
from .coercion import ValueCoercer
from .facets import FacetField, FacetKey, decode_facets
from .fields import FieldNameCodec
from .hydration import Hydrator
from .interfaces import EntityLoader
from .pagination import paginate
from .query import FacetRequest, SearchQuery
from .results import RawReference, decode_results

log = logging.getLogger("search.result_set")


class ResultSet:
    def __init__(
        self,
        response: Mapping[str, Any],
        query: Optional[SearchQuery] = None,
        loader: Optional[EntityLoader] = None,
        *,
        settings: Optional[Settings] = None,
        codec: Optional[FieldNameCodec] = None,
        coercer: Optional[ValueCoercer] = None,
    ) -> None:
        self.settings = settings or default_settings
        self.query = query or SearchQuery()
        self.codec = codec or FieldNameCodec.from_settings(self.settings)
        self.coercer = coercer or ValueCoercer()

        try:
            parsed = SearchResponse.model_validate(response)
        except ValidationError as exc:
            raise MalformedResponseError(f"Malformed search response: {exc}") from exc

        refs, self.total = decode_results(parsed, id_separator=self.settings.ID_SEPARATOR)
        self._refs: List[RawReference] = refs
        self.raw_results = self._paginate(refs)

        self._requests: Dict[FacetKey, FacetRequest] = {r.key: r for r in self.query.facets}
        self._facets = decode_facets(
            parsed.facet_counts,
            self.codec,
            self.coercer,
            self._requests,
            skip_malformed=self.settings.SKIP_MALFORMED_FACET_ROWS,
        )

        self._hydrator = Hydrator(loader, strict=self.settings.STRICT_HYDRATION)
        self._hydrator.register(refs)
        for req in self.query.facets:
            if req.reference:
                field = self._field_for(req)
                self._hydrator.register(field.bind(self._hydrator, req.reference))

        self._results: Optional[List[Any]] = None
        self._results_lock = threading.Lock()
        log.debug(
            "result_set.decoded docs=%d total=%d facets=%d",
            len(refs), self.total, len(self._facets.plain) + len(self._facets.dynamic),
        )

    # ---------------- results ----------------

    def _paginate(self, items: List[Any]) -> List[Any]:
        return paginate(
            items,
            self.total,
            self.query.page,
            self.query.per_page,
            default_per_page=self.settings.DEFAULT_PER_PAGE,
            enabled=self.settings.PAGINATE_RESULTS and self.query.paginated,
        )

    @property
    def results(self) -> List[Any]:
        if self._results is None:
            with self._results_lock:
                if self._results is None:
                    loaded = self._hydrator.hydrate(self._refs)
                    # Missing entities stay in place as None so positions line up
                    self._results = self._paginate([loaded.get(ref) for ref in self._refs])
        return self._results

    # ---------------- facets ----------------

    def _field_for(self, request: FacetRequest) -> FacetField:
        field = self._facets.get(request.name, request.namespace)
        if field is None:
            # Requested but the engine reported nothing for it
            field = FacetField(request.name, namespace=request.namespace, field_type=request.field_type)
            if request.namespace is not None:
                self._facets.dynamic[(request.namespace, request.name)] = field
            else:
                self._facets.plain[request.name] = field
        return field

    def _field_error(self, request: FacetRequest) -> Optional[HydrantError]:
        try:
            wire_name = self.codec.encode(request.name, request.field_type, request.namespace)
        except UnknownFieldTypeError as exc:
            return exc
        return self._facets.errors.get(wire_name)

    def facet(self, field_name: str) -> FacetField:
        request = self.query.facet(field_name)
        if request is None:
            raise FacetNotRequestedError(field_name)
        error = self._field_error(request)
        if error is not None:
            raise error
        return self._field_for(request)

    def dynamic_facet(self, namespace: str, field_name: str) -> FacetField:
        request = self.query.facet(field_name, namespace)
        if request is None:
            raise FacetNotRequestedError(field_name, namespace)
        error = self._field_error(request)
        if error is not None:
            raise error
        return self._field_for(request)

    @property
    def facets(self) -> List[FacetField]:
        """
        Non-dynamic requested facets in request order. Fields that failed to
        decode are left out and reported through `facet_errors`.
        """
        return [
            self._field_for(r)
            for r in self.query.facets
            if r.namespace is None and self._field_error(r) is None
        ]

    @property
    def facet_errors(self) -> Dict[str, HydrantError]:
        return dict(self._facets.errors)

    def __repr__(self) -> str:
        return f"<ResultSet total={self.total} raw_results={len(self._refs)}>"
