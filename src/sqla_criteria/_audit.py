"""Audit logging for policy decisions and compiled criteria."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqla_criteria._types import ActorLike

if TYPE_CHECKING:
    from sqla_criteria.compiler._plan import CompiledCriteria

__all__ = ["log_compiled_criteria", "log_policy_decision"]

logger = logging.getLogger("sqla_criteria")


def log_policy_decision(
    *,
    entity: Any,
    capability: str,
    actor: ActorLike,
    policy: object | None,
    allowed: bool,
    path: str,
) -> None:
    """Log a single node decision of the graph walk.

    Logging levels:
    - INFO: Summary (entity type, capability, verdict)
    - DEBUG: Detailed (policy class, entity id, attribute path)
    - WARNING: No policy found (missing-policy default applied)

    Example::

        log_policy_decision(
            entity=order,
            capability="get",
            actor=current_user,
            policy=order_policy,
            allowed=True,
            path="orders[0]",
        )
    """
    entity_name = type(entity).__name__
    verdict = "allowed" if allowed else "denied"

    if policy is None:
        logger.warning(
            "No policy registered for (%s, %s): %s by default",
            entity_name,
            type(actor).__name__,
            verdict,
        )
        return

    logger.info(
        "Policy decision: %s.%s %s for actor %r",
        entity_name,
        capability,
        verdict,
        actor,
    )

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Policy %s on %s(id=%r) at %s: %s",
            type(policy).__name__,
            entity_name,
            getattr(entity, "id", None),
            path or "<root>",
            verdict,
        )


def log_compiled_criteria(*, criteria: object, compiled: CompiledCriteria) -> None:
    """Log the plan compiled from a criteria value at DEBUG level."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug(
        "Compiled %s: predicates=%s includes=%s order=%s soft_delete_filter=%s",
        type(criteria).__name__,
        [str(p) for p in compiled.predicates],
        list(compiled.includes),
        [f"{o.field} {o.direction.value}" for o in compiled.order_fields],
        compiled.soft_delete_filter,
    )
