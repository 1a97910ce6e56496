"""Criteria declaration: field metadata and the static criteria registry."""

from sqla_criteria.criteria._base import OrderField, Pagination, SearchCriteria, SortDirection
from sqla_criteria.criteria._fields import (
    CompareOperator,
    FieldKind,
    FieldMetadata,
    FieldSpec,
    compare,
    ignore,
    include,
)
from sqla_criteria.criteria._registry import (
    CriteriaRegistry,
    CriteriaSchema,
    criteria,
    get_default_criteria_registry,
    resolve_field_metadata,
)

__all__ = [
    "CompareOperator",
    "CriteriaRegistry",
    "CriteriaSchema",
    "FieldKind",
    "FieldMetadata",
    "FieldSpec",
    "OrderField",
    "Pagination",
    "SearchCriteria",
    "SortDirection",
    "compare",
    "criteria",
    "get_default_criteria_registry",
    "ignore",
    "include",
    "resolve_field_metadata",
]
