"""Read service: criteria searches with record-level authorization."""

from sqla_criteria.session._async import async_get_by_id, async_search
from sqla_criteria.session._search import SearchResult, get_by_id, search

__all__ = [
    "SearchResult",
    "async_get_by_id",
    "async_search",
    "get_by_id",
    "search",
]
