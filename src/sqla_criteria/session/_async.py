"""Async twins of search() and get_by_id() for ``AsyncSession``."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from sqla_criteria._checks import authorize
from sqla_criteria._types import ActorLike
from sqla_criteria.compiler._query import count_statement
from sqla_criteria.config._config import CriteriaConfig, get_global_config
from sqla_criteria.criteria._base import SearchCriteria
from sqla_criteria.criteria._registry import CriteriaRegistry
from sqla_criteria.policy._base import Capability
from sqla_criteria.policy._registry import PolicyRegistry
from sqla_criteria.session._search import SearchResult, _by_id_criteria, _prepare, _shape

__all__ = ["async_get_by_id", "async_search"]


async def async_search(
    session: AsyncSession,
    model: type,
    criteria: Any = None,
    *,
    actor: ActorLike | None = None,
    capability: Capability | str = Capability.GET,
    mapper: Callable[[Any], Any] | None = None,
    criteria_registry: CriteriaRegistry | None = None,
    policy_registry: PolicyRegistry | None = None,
    config: CriteriaConfig | None = None,
) -> SearchResult[Any]:
    """Async version of :func:`~sqla_criteria.session.search`.

    Only the count and the row load await the database; compiling and
    the graph check run synchronously on the loaded objects. Relationships
    that were not eager-loaded are not visited.

    Example::

        result = await async_search(session, Member, MemberSearch(name="ann"), actor=user)
    """
    cfg = config if config is not None else get_global_config()
    compiled, filtered = _prepare(model, criteria, criteria_registry, cfg)

    if compiled.pagination is not None:
        total = await session.execute(count_statement(filtered))
        compiled.pagination.total_records = total.scalar_one()

    result = await session.scalars(_shape(filtered, model, compiled, cfg))
    entities = list(result.unique())
    authorize(actor, capability, entities, registry=policy_registry, config=cfg)

    items = [mapper(e) for e in entities] if mapper is not None else entities
    return SearchResult(criteria=criteria, items=items)


async def async_get_by_id(
    session: AsyncSession,
    model: type,
    id: Any,
    criteria: Any = None,
    *,
    criteria_type: type = SearchCriteria,
    actor: ActorLike | None = None,
    capability: Capability | str = Capability.GET,
    mapper: Callable[[Any], Any] | None = None,
    criteria_registry: CriteriaRegistry | None = None,
    policy_registry: PolicyRegistry | None = None,
    config: CriteriaConfig | None = None,
) -> Any | None:
    """Async version of :func:`~sqla_criteria.session.get_by_id`."""
    criteria = _by_id_criteria(id, criteria, criteria_type)
    if not criteria.id:
        return None
    result = await async_search(
        session,
        model,
        criteria,
        actor=actor,
        capability=capability,
        mapper=mapper,
        criteria_registry=criteria_registry,
        policy_registry=policy_registry,
        config=config,
    )
    return result.items[0] if result.items else None
