"""
Value coercion: raw wire literal -> typed Python value, dispatched on FieldType.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Union

from ..config import FieldType
from ..errors import CoercionError
from .query import TimeRange

TypedValue = Union[str, int, float, bool, datetime, TimeRange]


def _to_string(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return str(raw)
    raise ValueError(raw)


def _to_integer(raw: Any) -> int:
    if isinstance(raw, bool):
        raise ValueError(raw)
    if isinstance(raw, int):
        return raw
    # int() would also accept "1_000" and surrounding whitespace
    s = str(raw)
    if not s or s != s.strip() or "_" in s:
        raise ValueError(raw)
    return int(s, 10)


def _to_float(raw: Any) -> float:
    if isinstance(raw, bool):
        raise ValueError(raw)
    if isinstance(raw, (int, float)):
        return float(raw)
    s = str(raw)
    if not s or s != s.strip() or "_" in s:
        raise ValueError(raw)
    return float(s)


def _to_boolean(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if raw == "true":
        return True
    if raw == "false":
        return False
    raise ValueError(raw)


def parse_timestamp(raw: Any) -> datetime:
    """Parse an engine timestamp such as ``2009-04-07T20:25:23Z`` into an aware UTC datetime."""
    if isinstance(raw, datetime):
        return raw if raw.tzinfo else raw.replace(tzinfo=timezone.utc)
    s = str(raw)
    if not s.endswith("Z"):
        raise ValueError(raw)
    dt = datetime.fromisoformat(s[:-1] + "+00:00")
    return dt.astimezone(timezone.utc)


class ValueCoercer:
    """Explicit FieldType -> converter table; extend by passing `extra`."""

    DEFAULT_TABLE: Dict[FieldType, Callable[[Any], Any]] = {
        FieldType.string: _to_string,
        FieldType.integer: _to_integer,
        FieldType.float: _to_float,
        FieldType.boolean: _to_boolean,
        FieldType.timestamp: parse_timestamp,
    }

    def __init__(self, extra: Optional[Dict[FieldType, Callable[[Any], Any]]] = None) -> None:
        self.table = dict(self.DEFAULT_TABLE)
        if extra:
            self.table.update(extra)

    def coerce(self, field_type: FieldType, raw: Any) -> TypedValue:
        fn = self.table.get(field_type)
        if fn is None:
            raise CoercionError(field_type, raw)
        try:
            return fn(raw)
        except (TypeError, ValueError, OverflowError) as exc:
            raise CoercionError(field_type, raw) from exc
