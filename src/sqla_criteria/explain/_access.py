"""explain_access(): explain why an actor can/can't act on an entity graph."""

from __future__ import annotations

from typing import Any

from sqla_criteria._graph import walk_graph
from sqla_criteria._types import ActorLike
from sqla_criteria.config._config import CriteriaConfig
from sqla_criteria.explain._models import AccessExplanation
from sqla_criteria.policy._base import Capability
from sqla_criteria.policy._registry import PolicyRegistry

__all__ = ["explain_access"]


def explain_access(
    actor: ActorLike | None,
    capability: Capability | str,
    resource: Any,
    *,
    registry: PolicyRegistry | None = None,
    config: CriteriaConfig | None = None,
) -> AccessExplanation:
    """Explain the outcome of a graph check.

    Runs the same walk as :func:`~sqla_criteria.can` and reports the
    verdict, how many nodes were evaluated, which entity types had no
    policy, and which node (if any) denied access.

    Args:
        actor: The acting user, or ``None`` for anonymous callers.
        capability: The capability to check.
        resource: An entity, or an iterable of entities.
        registry: Optional custom registry. Defaults to the global registry.
        config: Optional config. Defaults to the global config.

    Returns:
        An ``AccessExplanation``.

    Example::

        print(explain_access(user, Capability.GET, order))
        # Access Check: DENIED
        #   ...
        #   Denied by Invoice(id=7) at invoices[0]
    """
    decision = walk_graph(actor, capability, resource, registry=registry, config=config)
    return AccessExplanation(
        actor_repr=repr(actor),
        capability=Capability(capability).value,
        resource_type=type(resource).__name__,
        allowed=decision.allowed,
        nodes_checked=decision.nodes_checked,
        unguarded_types=list(decision.unguarded),
        denied_type=decision.denied_type.__name__ if decision.denied_type is not None else None,
        denied_id=repr(decision.denied_id) if decision.denied_type is not None else None,
        denied_path=decision.denied_path,
    )
