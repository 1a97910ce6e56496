"""compile_criteria(): walk a criteria value into a query plan."""

from __future__ import annotations

from typing import Any

from sqla_criteria.compiler._plan import CompiledCriteria, FilterPredicate
from sqla_criteria.config._config import CriteriaConfig, get_global_config
from sqla_criteria.criteria._base import Pagination
from sqla_criteria.criteria._fields import FieldKind, include_name
from sqla_criteria.criteria._registry import CriteriaRegistry, get_default_criteria_registry

__all__ = ["compile_criteria"]


def _join(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


def _walk(
    value: Any,
    prefix: str,
    registry: CriteriaRegistry,
    predicates: list[FilterPredicate],
    includes: list[str],
) -> None:
    schema = registry.schema_for(type(value))
    for spec in schema.fields:
        field_value = getattr(value, spec.name)
        meta = spec.metadata

        if spec.kind is FieldKind.INCLUDE:
            if field_value is True:
                includes.append(_join(prefix, include_name(spec)))
            continue

        path = _join(prefix, spec.segment)
        if spec.kind is FieldKind.NESTED:
            # Nested values are only skipped when absent; their own fields decide.
            if field_value is not None and (meta.always_compare or not meta.ignore):
                _walk(field_value, path, registry, predicates, includes)
            continue

        if not meta.always_compare and (meta.ignore or spec.is_zero(field_value)):
            continue

        predicates.append(
            FilterPredicate(
                path=path,
                operator=spec.operator,
                value=field_value,
                kind=spec.kind,
                case_sensitive=meta.case_sensitive,
            )
        )


def compile_criteria(
    criteria: Any,
    *,
    registry: CriteriaRegistry | None = None,
    config: CriteriaConfig | None = None,
) -> CompiledCriteria:
    """Compile a criteria value into predicates, include paths and directives.

    Fields are visited in declaration order, depth-first through nested
    criteria. A field yields a predicate unless it holds its type's zero
    value or is ignored; ``always_compare`` overrides both. Include flags
    set to ``True`` yield include paths and are never compared.

    Args:
        criteria: An instance of a registered criteria class, or ``None``.
        registry: Optional criteria registry. Defaults to the global one.
        config: Optional config. Defaults to the global config.

    Returns:
        A ``CompiledCriteria``. ``None`` criteria compile to an empty plan
        that still excludes soft-deleted rows.

    Raises:
        ConfigurationError: The criteria class (or a nested one) is not
            registered.

    Example::

        plan = compile_criteria(MemberSearch(name="ann"))
        [str(p) for p in plan.predicates]
        # ["name starts_with 'ann' (case-insensitive)"]
    """
    cfg = config if config is not None else get_global_config()
    if criteria is None:
        return CompiledCriteria(soft_delete_filter=cfg.soft_delete_column is not None)

    target = registry if registry is not None else get_default_criteria_registry()
    predicates: list[FilterPredicate] = []
    includes: list[str] = []
    _walk(criteria, "", target, predicates, includes)

    pagination = getattr(criteria, "pagination", None)
    if not isinstance(pagination, Pagination):
        pagination = None

    soft_delete_filter = (
        cfg.soft_delete_column is not None
        and getattr(criteria, cfg.soft_delete_column, None) is None
    )

    compiled = CompiledCriteria(
        predicates=tuple(predicates),
        includes=tuple(includes),
        order_fields=tuple(pagination.order_fields) if pagination is not None else (),
        pagination=pagination,
        soft_delete_filter=soft_delete_filter,
    )

    if cfg.log_compiled_criteria:
        from sqla_criteria._audit import log_compiled_criteria

        log_compiled_criteria(criteria=criteria, compiled=compiled)

    return compiled
