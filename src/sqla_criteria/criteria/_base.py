"""Base criteria, ordering and pagination types."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from sqla_criteria.criteria._fields import ignore
from sqla_criteria.criteria._registry import criteria

__all__ = ["OrderField", "Pagination", "SearchCriteria", "SortDirection"]


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def _missing_(cls, value: object) -> SortDirection | None:
        # Accept "DESC" and " Asc " as sent by clients.
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return None


@dataclass(kw_only=True)
class OrderField:
    """One ``ORDER BY`` entry: a root model attribute and a direction."""

    field: str
    direction: SortDirection = SortDirection.ASC


@dataclass(kw_only=True)
class Pagination:
    """Paging and ordering directives of a search.

    ``total_records`` is written back by the search service after the
    count query runs; it counts matching rows before skip/take.

    Example::

        page = Pagination(take=10, page=3)
        page.offset        # 20
        page.total_records = 23
        page.total_pages   # 3
    """

    skip: int | None = None
    take: int | None = None
    page: int | None = None
    take_all: bool = False
    order_fields: list[OrderField] = field(default_factory=list)
    total_records: int = 0

    @property
    def total_pages(self) -> int:
        if self.take is None or self.take <= 0:
            return 0
        return math.ceil(self.total_records / self.take)

    @property
    def offset(self) -> int:
        """Rows to skip: ``skip`` when positive, else derived from ``page``.

        Non-positive ``skip``, ``page`` or ``take`` values count as unset.
        """
        if self.skip is not None and self.skip > 0:
            return self.skip
        if self.page is not None and self.page > 1 and self.take is not None and self.take > 0:
            return (self.page - 1) * self.take
        return 0

    @property
    def limit(self) -> int | None:
        if self.take is None or self.take <= 0:
            return None
        return self.take


@criteria
class SearchCriteria:
    """Base class for criteria searched through the read service.

    ``is_deleted`` left as ``None`` excludes soft-deleted rows; set it to
    ``True`` or ``False`` to filter on the flag explicitly.
    """

    id: int = 0
    is_deleted: bool | None = None
    pagination: Pagination | None = ignore()
