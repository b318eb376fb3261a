"""
Pagination wrapper.

A paginated query gets a list subclass carrying page metadata; an
unpaginated one gets a plain list with no pagination attributes at all.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Optional, TypeVar, Union

T = TypeVar("T")


class PaginatedList(List[T]):
    def __init__(self, items: Iterable[T], page: int, per_page: int, total_entries: int) -> None:
        super().__init__(items)
        self.current_page = page
        self.per_page = per_page
        self.total_entries = total_entries

    @property
    def page(self) -> int:
        return self.current_page

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total_entries / self.per_page))

    @property
    def offset(self) -> int:
        return (self.current_page - 1) * self.per_page

    @property
    def previous_page(self) -> Optional[int]:
        return self.current_page - 1 if self.current_page > 1 else None

    @property
    def next_page(self) -> Optional[int]:
        return self.current_page + 1 if self.current_page < self.total_pages else None

    def __repr__(self) -> str:
        return (
            f"<PaginatedList page={self.current_page} per_page={self.per_page} "
            f"total_entries={self.total_entries} {list.__repr__(self)}>"
        )


def paginate(
    items: Iterable[T],
    total: int,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
    *,
    default_per_page: int = 30,
    enabled: bool = True,
) -> Union[PaginatedList[T], List[T]]:
    if not enabled or (page is None and per_page is None):
        return list(items)
    return PaginatedList(items, page or 1, per_page or default_per_page, total)
