"""search() and get_by_id(): criteria-driven reads with graph authorization."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from sqla_criteria._checks import authorize
from sqla_criteria._types import ActorLike
from sqla_criteria.compiler._compile import compile_criteria
from sqla_criteria.compiler._plan import CompiledCriteria
from sqla_criteria.compiler._query import (
    apply_filters,
    apply_includes,
    apply_ordering,
    apply_pagination,
    count_statement,
)
from sqla_criteria.config._config import CriteriaConfig, get_global_config
from sqla_criteria.criteria._base import SearchCriteria
from sqla_criteria.criteria._registry import CriteriaRegistry
from sqla_criteria.policy._base import Capability
from sqla_criteria.policy._registry import PolicyRegistry

__all__ = ["SearchResult", "get_by_id", "search"]

T = TypeVar("T")


@dataclass(slots=True)
class SearchResult(Generic[T]):
    """Items returned by a search, alongside the criteria that produced them.

    When the criteria carries pagination, its ``total_records`` has been
    filled in with the pre-paging row count.
    """

    criteria: Any
    items: list[T] = field(default_factory=list)


def _prepare(
    model: type,
    criteria: Any,
    registry: CriteriaRegistry | None,
    config: CriteriaConfig,
) -> tuple[CompiledCriteria, Select[Any]]:
    compiled = compile_criteria(criteria, registry=registry, config=config)
    return compiled, apply_filters(select(model), model, compiled, config=config)


def _shape(
    filtered: Select[Any],
    model: type,
    compiled: CompiledCriteria,
    config: CriteriaConfig,
) -> Select[Any]:
    stmt = apply_includes(filtered, model, compiled.includes, config=config)
    stmt = apply_ordering(stmt, model, compiled.order_fields)
    return apply_pagination(stmt, compiled.pagination)


def _by_id_criteria(id: Any, criteria: Any, criteria_type: type) -> Any:
    criteria = criteria if criteria is not None else criteria_type()
    if not getattr(criteria, "id", None):
        criteria = dataclasses.replace(criteria, id=id)
    return criteria


def search(
    session: Session,
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
    """Run a criteria search and authorize the whole result graph.

    Steps: compile the criteria, count matching rows into
    ``criteria.pagination.total_records`` (when pagination is present),
    load the shaped page, check *capability* for *actor* over every
    returned entity and its loaded relationships, then map the items.

    Args:
        session: The SQLAlchemy session to read from.
        model: The mapped model class to search.
        criteria: A criteria instance, or ``None`` for all non-deleted rows.
        actor: The acting user. ``None`` skips authorization.
        capability: Capability checked on the results (default ``GET``).
        mapper: Optional callable converting each entity (e.g. to a DTO).
        criteria_registry: Optional criteria registry.
        policy_registry: Optional policy registry.
        config: Optional config. Defaults to the global config.

    Returns:
        A ``SearchResult`` holding the (mapped) items.

    Raises:
        AuthorizationDenied: Any returned entity graph fails the check.
        ConfigurationError: The criteria does not fit *model*.

    Example::

        result = search(session, Member, MemberSearch(name="ann"), actor=current_user)
        for member in result.items:
            ...
    """
    cfg = config if config is not None else get_global_config()
    compiled, filtered = _prepare(model, criteria, criteria_registry, cfg)

    if compiled.pagination is not None:
        compiled.pagination.total_records = session.execute(
            count_statement(filtered)
        ).scalar_one()

    entities = list(session.scalars(_shape(filtered, model, compiled, cfg)).unique())
    authorize(actor, capability, entities, registry=policy_registry, config=cfg)

    items = [mapper(e) for e in entities] if mapper is not None else entities
    return SearchResult(criteria=criteria, items=items)


def get_by_id(
    session: Session,
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
    """Load one entity by id through the criteria pipeline.

    A criteria ``id`` that is already set wins over *id*. The caller's
    criteria object is not modified. Returns ``None`` when nothing
    matches; raises ``AuthorizationDenied`` when the match is denied.

    Example::

        member = get_by_id(
            session, Member, 5, MemberSearch(include_posts=True), actor=current_user
        )
        if member is None:
            raise HTTPException(404)
    """
    criteria = _by_id_criteria(id, criteria, criteria_type)
    if not criteria.id:
        return None
    result = search(
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
