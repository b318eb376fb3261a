"""
Result decoding: document list -> ordered RawReference list + total.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from ..errors import MalformedResponseError
from ..schemas import RawDocument, SearchResponse


@dataclass(frozen=True)
class RawReference:
    """A matched document before any entity loading: (class name, primary key)."""

    class_name: str
    primary_key: str


def _reference(doc: RawDocument, id_separator: str) -> RawReference:
    if doc.class_name and doc.primary_key:
        return RawReference(doc.class_name, doc.primary_key)
    if doc.id:
        class_name, sep, primary_key = doc.id.partition(id_separator)
        if sep and class_name and primary_key:
            return RawReference(class_name, primary_key)
    raise MalformedResponseError(f"Document has no usable id: {doc.model_dump()!r}")


def decode_results(
    response: SearchResponse,
    *,
    id_separator: str = " ",
) -> Tuple[List[RawReference], int]:
    section = response.response
    if section is None:
        return [], 0
    refs = [_reference(doc, id_separator) for doc in section.docs]
    total = section.numFound if section.numFound is not None else len(refs)
    return refs, total
