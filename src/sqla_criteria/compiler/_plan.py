"""Compiled query plan: predicates, include paths and pass-through directives."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqla_criteria.criteria._base import OrderField, Pagination
from sqla_criteria.criteria._fields import (
    SCALAR_OPERATORS,
    TEXT_OPERATORS,
    CompareOperator,
    FieldKind,
)
from sqla_criteria.exceptions import ConfigurationError, OperatorMismatchError

__all__ = ["CompiledCriteria", "FilterPredicate"]


@dataclass(frozen=True, slots=True)
class FilterPredicate:
    """A single field-level filter condition.

    Attributes:
        path: Dotted attribute path relative to the queried model.
        operator: The comparison operator.
        value: The criteria value (text or ordered scalar, never mixed).
        kind: ``FieldKind.TEXT`` or ``FieldKind.SCALAR``.
        case_sensitive: Compare text without lower-casing.
    """

    path: str
    operator: CompareOperator
    value: Any
    kind: FieldKind
    case_sensitive: bool = False

    def __post_init__(self) -> None:
        if self.kind is FieldKind.TEXT:
            allowed = TEXT_OPERATORS
            if self.value is not None and not isinstance(self.value, str):
                raise ConfigurationError(
                    f"Text predicate {self.path!r} got non-text value {self.value!r}"
                )
        elif self.kind is FieldKind.SCALAR:
            allowed = SCALAR_OPERATORS
            if isinstance(self.value, str) and not isinstance(self.value, Enum):
                raise ConfigurationError(
                    f"Scalar predicate {self.path!r} got text value {self.value!r}"
                )
        else:
            raise ConfigurationError(f"Predicate {self.path!r} has non-comparable kind {self.kind}")
        if self.operator not in allowed:
            raise OperatorMismatchError(
                field=self.path, operator=self.operator, kind=self.kind.value
            )

    def __str__(self) -> str:
        suffix = ""
        if self.kind is FieldKind.TEXT and self.operator is not CompareOperator.EQUALS:
            suffix = " (case-sensitive)" if self.case_sensitive else " (case-insensitive)"
        return f"{self.path} {self.operator.value} {self.value!r}{suffix}"


@dataclass(frozen=True, slots=True)
class CompiledCriteria:
    """Everything the storage layer needs to shape one query.

    Attributes:
        predicates: Conjunctive filter predicates, in declaration order.
        includes: Dotted relationship paths to eager-load.
        order_fields: Ordering directives passed through from pagination.
        pagination: The caller's pagination object, if any.
        soft_delete_filter: Exclude soft-deleted rows (the criteria does
            not filter on the soft-delete flag itself).
    """

    predicates: tuple[FilterPredicate, ...] = ()
    includes: tuple[str, ...] = ()
    order_fields: tuple[OrderField, ...] = ()
    pagination: Pagination | None = None
    soft_delete_filter: bool = True

    @property
    def is_empty(self) -> bool:
        return not (self.predicates or self.includes or self.order_fields)
