"""apply_criteria(): shape SELECT statements from compiled criteria."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.inspection import inspect as sa_inspect

from sqla_criteria.compiler._compile import compile_criteria
from sqla_criteria.compiler._plan import CompiledCriteria
from sqla_criteria.compiler._predicate import build_predicate
from sqla_criteria.compiler._relationship import build_loader_option
from sqla_criteria.config._config import CriteriaConfig, get_global_config
from sqla_criteria.criteria._base import OrderField, Pagination, SortDirection
from sqla_criteria.criteria._registry import CriteriaRegistry
from sqla_criteria.exceptions import ConfigurationError, UnknownFieldError

__all__ = [
    "apply_criteria",
    "apply_filters",
    "apply_includes",
    "apply_ordering",
    "apply_pagination",
    "count_statement",
]


def _compiled(
    criteria: Any,
    registry: CriteriaRegistry | None,
    config: CriteriaConfig,
) -> CompiledCriteria:
    if isinstance(criteria, CompiledCriteria):
        return criteria
    return compile_criteria(criteria, registry=registry, config=config)


def apply_filters(
    stmt: Select[Any],
    model: type,
    compiled: CompiledCriteria,
    *,
    config: CriteriaConfig | None = None,
) -> Select[Any]:
    """Apply the soft-delete filter and every predicate as WHERE clauses."""
    cfg = config if config is not None else get_global_config()
    column = cfg.soft_delete_column
    if compiled.soft_delete_filter and column is not None:
        if column in sa_inspect(model).column_attrs:
            stmt = stmt.where(getattr(model, column).is_not(True))
    for predicate in compiled.predicates:
        stmt = stmt.where(build_predicate(model, predicate))
    return stmt


def apply_includes(
    stmt: Select[Any],
    model: type,
    includes: tuple[str, ...] | list[str],
    *,
    config: CriteriaConfig | None = None,
) -> Select[Any]:
    """Add an eager-loading option for each dotted include path."""
    cfg = config if config is not None else get_global_config()
    for path in includes:
        stmt = stmt.options(build_loader_option(model, path, cfg.include_strategy))
    return stmt


def apply_ordering(
    stmt: Select[Any],
    model: type,
    order_fields: tuple[OrderField, ...] | list[OrderField],
) -> Select[Any]:
    """Append ``ORDER BY`` clauses; fields must be columns of *model*."""
    mapper = sa_inspect(model)
    for order in order_fields:
        if order.field not in mapper.column_attrs:
            raise UnknownFieldError(model=model.__name__, path=order.field)
        column = getattr(model, order.field)
        try:
            direction = SortDirection(order.direction)
        except ValueError:
            raise ConfigurationError(
                f"Invalid sort direction {order.direction!r} for {model.__name__}.{order.field}; "
                f"expected 'asc' or 'desc'"
            ) from None
        stmt = stmt.order_by(column.desc() if direction is SortDirection.DESC else column.asc())
    return stmt


def apply_pagination(stmt: Select[Any], pagination: Pagination | None) -> Select[Any]:
    """Apply offset/limit unless pagination is absent or asks for all rows."""
    if pagination is None or pagination.take_all:
        return stmt
    if pagination.offset:
        stmt = stmt.offset(pagination.offset)
    if pagination.limit:
        stmt = stmt.limit(pagination.limit)
    return stmt


def apply_criteria(
    stmt: Select[Any],
    model: type,
    criteria: Any = None,
    *,
    registry: CriteriaRegistry | None = None,
    config: CriteriaConfig | None = None,
) -> Select[Any]:
    """Apply a criteria value (or an already compiled plan) to a SELECT.

    Order of application: soft-delete filter, predicates, include
    loader options, ``ORDER BY``, offset/limit.

    Args:
        stmt: A SQLAlchemy 2.0 Select statement over *model*.
        model: The mapped model class the criteria describes.
        criteria: A criteria instance, a ``CompiledCriteria``, or ``None``.
        registry: Optional criteria registry. Defaults to the global one.
        config: Optional config. Defaults to the global config.

    Returns:
        A new Select with the criteria applied.

    Example::

        stmt = apply_criteria(select(Member), Member, MemberSearch(name="ann"))
        # SELECT ... WHERE members.is_deleted IS NOT 1
        #   AND lower(members.name) LIKE 'ann' || '%' ESCAPE '/'
    """
    cfg = config if config is not None else get_global_config()
    compiled = _compiled(criteria, registry, cfg)
    stmt = apply_filters(stmt, model, compiled, config=cfg)
    stmt = apply_includes(stmt, model, compiled.includes, config=cfg)
    stmt = apply_ordering(stmt, model, compiled.order_fields)
    return apply_pagination(stmt, compiled.pagination)


def count_statement(stmt: Select[Any]) -> Select[Any]:
    """Return a statement counting the rows *stmt* matches before offset/limit.

    Example::

        filtered = apply_filters(select(Member), Member, plan)
        total = session.execute(count_statement(filtered)).scalar_one()
    """
    inner = stmt.order_by(None).limit(None).offset(None)
    return select(func.count()).select_from(inner.subquery())
