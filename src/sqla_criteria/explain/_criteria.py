"""explain_criteria(): dry-run a criteria value against a model."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import CompileError

from sqla_criteria.compiler._compile import compile_criteria
from sqla_criteria.compiler._query import apply_criteria
from sqla_criteria.config._config import CriteriaConfig, get_global_config
from sqla_criteria.criteria._registry import CriteriaRegistry
from sqla_criteria.explain._models import CriteriaExplanation

__all__ = ["explain_criteria"]


def _compile_sql(stmt: Any) -> str:
    """Compile with literal binds; types without a literal renderer keep placeholders."""
    try:
        return str(stmt.compile(compile_kwargs={"literal_binds": True}))
    except (CompileError, NotImplementedError):
        return str(stmt.compile())


def explain_criteria(
    model: type,
    criteria: Any = None,
    *,
    registry: CriteriaRegistry | None = None,
    config: CriteriaConfig | None = None,
) -> CriteriaExplanation:
    """Explain how *criteria* would filter, load and order *model* rows.

    Does not execute anything; no database connection is needed.

    Args:
        model: The mapped model class.
        criteria: A criteria instance, or ``None``.
        registry: Optional criteria registry. Defaults to the global one.
        config: Optional config. Defaults to the global config.

    Returns:
        A ``CriteriaExplanation``.

    Example::

        print(explain_criteria(Member, MemberSearch(name="ann")))
        # Criteria Explanation for MemberSearch on Member
        #   Predicates:
        #     - name starts_with 'ann' (case-insensitive)
        #   ...
    """
    cfg = config if config is not None else get_global_config()
    compiled = compile_criteria(criteria, registry=registry, config=cfg)
    stmt = apply_criteria(select(model), model, compiled, config=cfg)
    return CriteriaExplanation(
        model_name=model.__name__,
        criteria_type=type(criteria).__name__ if criteria is not None else "None",
        predicates=[str(p) for p in compiled.predicates],
        includes=list(compiled.includes),
        order_fields=[f"{o.field} {o.direction.value}" for o in compiled.order_fields],
        soft_delete_filter=compiled.soft_delete_filter,
        sql=_compile_sql(stmt),
    )
