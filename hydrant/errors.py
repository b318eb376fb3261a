"""
Error taxonomy for Hydrant.

Structural errors (MalformedResponseError) are fatal to a whole decode.
UnknownFieldTypeError and CoercionError are scoped to one field or row.
MissingEntityError is only raised when strict hydration is enabled.
"""

from __future__ import annotations

from typing import Any, Optional


class HydrantError(Exception):
    """Base class for every error raised by Hydrant."""


class MalformedResponseError(HydrantError):
    """Raised when the raw engine response cannot be parsed at all."""


class UnknownFieldTypeError(HydrantError):
    """Raised when a wire field name carries an unrecognised type suffix."""

    def __init__(self, wire_name: str, suffix: Optional[str] = None) -> None:
        super().__init__(f"Unknown field type suffix {suffix!r} in field {wire_name!r}")
        self.wire_name = wire_name
        self.suffix = suffix


class CoercionError(HydrantError):
    """Raised when a raw value cannot be converted to its declared type."""

    def __init__(self, field_type: Any, raw: Any) -> None:
        type_name = getattr(field_type, "value", field_type)
        super().__init__(f"Cannot coerce {raw!r} to {type_name}")
        self.field_type = field_type
        self.raw = raw


class MissingEntityError(HydrantError):
    """Raised in strict mode when a referenced entity could not be loaded."""

    def __init__(self, class_name: str, primary_key: str) -> None:
        super().__init__(f"No {class_name} found with primary key {primary_key!r}")
        self.class_name = class_name
        self.primary_key = primary_key


class FacetNotRequestedError(HydrantError, KeyError):
    """Raised when looking up a facet that was never part of the query."""

    def __init__(self, field_name: str, namespace: Optional[str] = None) -> None:
        label = f"{namespace}:{field_name}" if namespace else field_name
        super().__init__(f"Facet {label!r} was not requested")
        self.field_name = field_name
        self.namespace = namespace

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class TransportError(HydrantError):
    """Raised for non-successful responses from the search engine."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def __repr__(self) -> str:
        return (
            f"<TransportError "
            f"status_code={self.status_code!r} "
            f"message={self.args[0]!r} "
            f"body={self.body!r}>"
        )
