"""Predicate builder: render a FilterPredicate as a SQLAlchemy expression."""

from __future__ import annotations

import operator
from collections.abc import Callable
from typing import Any

from sqlalchemy import func

from sqla_criteria._types import FilterExpression
from sqla_criteria.compiler._plan import FilterPredicate
from sqla_criteria.compiler._relationship import resolve_column, traverse_relationship_path
from sqla_criteria.criteria._fields import CompareOperator, FieldKind

__all__ = ["build_predicate"]

_SCALAR_OPERATORS: dict[CompareOperator, Callable[[Any, Any], FilterExpression]] = {
    CompareOperator.EQUALS: operator.eq,
    CompareOperator.GREATER_THAN: operator.gt,
    CompareOperator.GREATER_OR_EQUAL: operator.ge,
    CompareOperator.LESS_THAN: operator.lt,
    CompareOperator.LESS_OR_EQUAL: operator.le,
}


def _render_text(column: Any, predicate: FilterPredicate) -> FilterExpression:
    op = predicate.operator
    if op is CompareOperator.EQUALS:
        return column == predicate.value

    if predicate.case_sensitive:
        lhs, value = column, predicate.value
    else:
        lhs, value = func.lower(column, type_=column.type), predicate.value.lower()

    if op is CompareOperator.CONTAINS:
        return lhs.contains(value, autoescape=True)
    if op is CompareOperator.ENDS_WITH:
        return lhs.endswith(value, autoescape=True)
    return lhs.startswith(value, autoescape=True)


def build_predicate(model: type, predicate: FilterPredicate) -> FilterExpression:
    """Render one predicate against *model* as a ``ColumnElement[bool]``.

    Text predicates use ``LIKE`` with escaped wildcards; case-insensitive
    ones compare ``lower(column)`` with the lower-cased value. Ordered
    scalars map straight to ``=``, ``>``, ``>=``, ``<``, ``<=``. A ``None``
    value renders as ``IS NULL``. Dotted paths become EXISTS subqueries
    over the relationships they cross.

    The predicate value itself is never modified.

    Args:
        model: The mapped model class being queried.
        predicate: A compiled ``FilterPredicate``.

    Returns:
        A boolean SQLAlchemy expression for ``Select.where()``.

    Raises:
        UnknownFieldError: The path does not resolve to a column.

    Example::

        expr = build_predicate(
            Member,
            FilterPredicate(
                path="address.city",
                operator=CompareOperator.EQUALS,
                value="Lagos",
                kind=FieldKind.TEXT,
            ),
        )
        # EXISTS (SELECT 1 FROM addresses WHERE ... AND addresses.city = 'Lagos')
    """
    segments = predicate.path.split(".")
    column = resolve_column(model, segments, predicate.path)

    if predicate.value is None:
        leaf: FilterExpression = column.is_(None)
    elif predicate.kind is FieldKind.TEXT:
        leaf = _render_text(column, predicate)
    else:
        leaf = _SCALAR_OPERATORS[predicate.operator](column, predicate.value)

    return traverse_relationship_path(model, segments[:-1], leaf)
