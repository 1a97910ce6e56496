"""Compiler: turns criteria values into SQLAlchemy filters and loader options."""

from sqla_criteria.compiler._compile import compile_criteria
from sqla_criteria.compiler._plan import CompiledCriteria, FilterPredicate
from sqla_criteria.compiler._predicate import build_predicate
from sqla_criteria.compiler._query import (
    apply_criteria,
    apply_filters,
    apply_includes,
    apply_ordering,
    apply_pagination,
    count_statement,
)
from sqla_criteria.compiler._relationship import (
    build_loader_option,
    resolve_column,
    traverse_relationship_path,
)

__all__ = [
    "CompiledCriteria",
    "FilterPredicate",
    "apply_criteria",
    "apply_filters",
    "apply_includes",
    "apply_ordering",
    "apply_pagination",
    "build_loader_option",
    "build_predicate",
    "compile_criteria",
    "count_statement",
    "resolve_column",
    "traverse_relationship_path",
]
