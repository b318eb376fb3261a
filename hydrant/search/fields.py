"""
Field-name codec.

Engine field names are flat strings built from a domain field name, a type
suffix and an optional dynamic namespace:

    title_s                 -> (title, string)
    custom_string:test_s    -> (test, string, namespace=custom_string)

The suffix table is injected so differently configured backends can coexist.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from ..config import FieldType, Settings, settings as default_settings
from ..errors import UnknownFieldTypeError


@dataclass(frozen=True)
class FieldName:
    field_name: str
    field_type: FieldType
    namespace: Optional[str] = None

    @property
    def is_dynamic(self) -> bool:
        return self.namespace is not None


class FieldNameCodec:
    def __init__(
        self,
        suffixes: Optional[Mapping[str, FieldType]] = None,
        dynamic_separator: str = ":",
    ) -> None:
        self.suffixes: Dict[str, FieldType] = {
            k: FieldType(v) for k, v in (suffixes or {}).items()
        }
        self.types: Dict[FieldType, str] = {t: s for s, t in self.suffixes.items()}
        self.dynamic_separator = dynamic_separator

    @classmethod
    def from_settings(cls, cfg: Optional[Settings] = None) -> "FieldNameCodec":
        cfg = cfg or default_settings
        return cls(cfg.FIELD_TYPE_SUFFIXES, cfg.DYNAMIC_FIELD_SEPARATOR)  # type: ignore[arg-type]

    def encode(
        self,
        field_name: str,
        field_type: FieldType,
        namespace: Optional[str] = None,
    ) -> str:
        suffix = self.types.get(FieldType(field_type))
        if suffix is None:
            raise UnknownFieldTypeError(field_name, None)
        wire = f"{field_name}_{suffix}"
        if namespace:
            wire = f"{namespace}{self.dynamic_separator}{wire}"
        return wire

    def decode(self, wire_name: str) -> FieldName:
        namespace: Optional[str] = None
        local = wire_name
        if self.dynamic_separator in wire_name:
            namespace, local = wire_name.split(self.dynamic_separator, 1)

        base, sep, suffix = local.rpartition("_")
        if not sep or not base:
            raise UnknownFieldTypeError(wire_name, None)
        field_type = self.suffixes.get(suffix)
        if field_type is None:
            raise UnknownFieldTypeError(wire_name, suffix)
        return FieldName(base, field_type, namespace or None)
