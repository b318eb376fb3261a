"""
Facet decoding.

Two independent sub-sections of `facet_counts` are handled:

- facet_fields: flattened ``[value_1, count_1, value_2, count_2, ...]`` per
  field. Rows keep wire order; values are coerced by the field's type suffix.
- facet_dates: ``{bucket_start: count, ..., "gap": "+86400SECONDS"}`` per
  field. Rows are ordered chronologically and carry a TimeRange value; the
  last bucket is clamped to the end of the requested range.

Errors are scoped: an unknown type suffix drops that field (recorded in
`FacetSet.errors`), a coercion failure is attached to its row.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from ..config import FieldType
from ..errors import CoercionError, HydrantError, MalformedResponseError, UnknownFieldTypeError
from ..schemas import FacetCounts
from .coercion import TypedValue, ValueCoercer, parse_timestamp
from .fields import FieldName, FieldNameCodec
from .query import FacetRequest, TimeRange
from .results import RawReference

log = logging.getLogger("search.facets")

_BUCKET_KEY = re.compile(r"^\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d(\.\d+)?Z$")
_GAP = re.compile(r"^\+(\d+)(SECOND|MINUTE|HOUR|DAY)S?$")
_GAP_UNITS = {"SECOND": 1, "MINUTE": 60, "HOUR": 3600, "DAY": 86400}

FacetKey = Tuple[Optional[str], str]


class FacetRow:
    """One (value, count) pair of a facet; `instance` hydrates lazily."""

    __slots__ = ("_value", "count", "raw", "error", "_reference", "_hydrator")

    def __init__(
        self,
        value: Optional[TypedValue],
        count: int,
        *,
        raw: Any = None,
        error: Optional[CoercionError] = None,
    ) -> None:
        self._value = value
        self.count = count
        self.raw = raw
        self.error = error
        self._reference: Optional[RawReference] = None
        self._hydrator = None

    @property
    def value(self) -> TypedValue:
        if self.error is not None:
            raise self.error
        return self._value  # type: ignore[return-value]

    @property
    def reference(self) -> Optional[RawReference]:
        return self._reference

    @property
    def instance(self) -> Any:
        if self._reference is None or self._hydrator is None:
            return None
        return self._hydrator.instance(self._reference)

    def __repr__(self) -> str:
        shown = f"error={self.error!s}" if self.error else f"value={self._value!r}"
        return f"<FacetRow {shown} count={self.count}>"


class FacetField:
    def __init__(
        self,
        field_name: str,
        rows: Optional[List[FacetRow]] = None,
        *,
        namespace: Optional[str] = None,
        field_type: Optional[FieldType] = None,
    ) -> None:
        self.field_name = field_name
        self.namespace = namespace
        self.field_type = field_type
        self.rows: List[FacetRow] = rows or []

    def bind(self, hydrator: Any, class_name: str) -> List[RawReference]:
        """Attach a hydrator so rows can resolve `instance`; returns the row references."""
        refs: List[RawReference] = []
        for row in self.rows:
            if row.error is not None or row.raw is None:
                continue
            row._reference = RawReference(class_name, str(row.raw))
            row._hydrator = hydrator
            refs.append(row._reference)
        return refs

    def __iter__(self) -> Iterator[FacetRow]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __repr__(self) -> str:
        label = f"{self.namespace}:{self.field_name}" if self.namespace else self.field_name
        return f"<FacetField {label} rows={len(self.rows)}>"


class FacetSet:
    def __init__(self) -> None:
        self.plain: Dict[str, FacetField] = {}
        self.dynamic: Dict[Tuple[str, str], FacetField] = {}
        self.errors: Dict[str, HydrantError] = {}

    def add(self, name: FieldName, field: FacetField) -> None:
        if name.namespace is not None:
            self.dynamic[(name.namespace, name.field_name)] = field
        else:
            self.plain[name.field_name] = field

    def get(self, field_name: str, namespace: Optional[str] = None) -> Optional[FacetField]:
        if namespace is not None:
            return self.dynamic.get((namespace, field_name))
        return self.plain.get(field_name)


# ---------------- helpers ----------------

def _count(wire_name: str, raw: Any) -> int:
    if isinstance(raw, bool):
        raise MalformedResponseError(f"Facet {wire_name!r} has a non-integer count: {raw!r}")
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise MalformedResponseError(f"Facet {wire_name!r} has a non-integer count: {raw!r}") from exc


def parse_gap(raw: Any) -> timedelta:
    m = _GAP.match(str(raw or ""))
    if not m:
        raise CoercionError("gap", raw)
    return timedelta(seconds=int(m.group(1)) * _GAP_UNITS[m.group(2)])


def _decode_flat(
    wire_name: str,
    name: FieldName,
    values: List[Any],
    coercer: ValueCoercer,
    skip_malformed: bool,
) -> FacetField:
    if len(values) % 2:
        raise MalformedResponseError(f"Facet {wire_name!r} has an odd number of value/count entries")

    rows: List[FacetRow] = []
    for i in range(0, len(values), 2):
        raw, count = values[i], _count(wire_name, values[i + 1])
        if raw is None:
            # facet.missing bucket: documents without a value
            rows.append(FacetRow(None, count, raw=None))
            continue
        try:
            rows.append(FacetRow(coercer.coerce(name.field_type, raw), count, raw=raw))
        except CoercionError as exc:
            if skip_malformed:
                log.warning("facets.row_skipped field=%s raw=%r", wire_name, raw)
                continue
            log.warning("facets.row_error field=%s raw=%r", wire_name, raw)
            rows.append(FacetRow(None, count, raw=raw, error=exc))
    return FacetField(name.field_name, rows, namespace=name.namespace, field_type=name.field_type)


def _decode_dates(
    wire_name: str,
    name: FieldName,
    values: Mapping[str, Any],
    request: Optional[FacetRequest],
) -> FacetField:
    gap = parse_gap(values.get("gap"))

    buckets: List[Tuple[datetime, int]] = []
    for key, count in values.items():
        if _BUCKET_KEY.match(key):
            buckets.append((parse_timestamp(key), _count(wire_name, count)))
    buckets.sort(key=lambda b: b[0])

    range_end: Optional[datetime] = None
    if request is not None and request.time_range is not None:
        range_end = parse_timestamp(request.time_range.end)
    elif values.get("end"):
        range_end = parse_timestamp(values["end"])

    rows: List[FacetRow] = []
    for idx, (start, count) in enumerate(buckets):
        end = start + gap
        if idx == len(buckets) - 1 and range_end is not None and range_end < end:
            end = range_end
        rows.append(FacetRow(TimeRange(start, end), count, raw=start))
    return FacetField(name.field_name, rows, namespace=name.namespace, field_type=name.field_type)


# ---------------- entry point ----------------

def decode_facets(
    section: Optional[FacetCounts],
    codec: FieldNameCodec,
    coercer: ValueCoercer,
    requests: Optional[Mapping[FacetKey, FacetRequest]] = None,
    *,
    skip_malformed: bool = False,
) -> FacetSet:
    facets = FacetSet()
    if section is None:
        return facets
    requests = requests or {}

    for wire_name, values in section.facet_fields.items():
        try:
            name = codec.decode(wire_name)
        except UnknownFieldTypeError as exc:
            log.warning("facets.unknown_type field=%s", wire_name)
            facets.errors[wire_name] = exc
            continue
        facets.add(name, _decode_flat(wire_name, name, values, coercer, skip_malformed))

    for wire_name, values in section.facet_dates.items():
        try:
            name = codec.decode(wire_name)
            request = requests.get((name.namespace, name.field_name))
            field = _decode_dates(wire_name, name, values, request)
        except (UnknownFieldTypeError, CoercionError) as exc:
            log.warning("facets.date_error field=%s error=%s", wire_name, exc)
            facets.errors[wire_name] = exc
            continue
        if facets.get(name.field_name, name.namespace) is not None:
            log.debug("facets.date_overrides_field field=%s", wire_name)
        facets.add(name, field)

    return facets
