"""Graph checks: can() and authorize() over an entity and its object graph."""

from __future__ import annotations

from typing import Any

from sqla_criteria._graph import walk_graph
from sqla_criteria._types import ActorLike
from sqla_criteria.config._config import CriteriaConfig
from sqla_criteria.exceptions import AuthorizationDenied
from sqla_criteria.policy._base import Capability
from sqla_criteria.policy._registry import PolicyRegistry

__all__ = ["authorize", "can"]


def can(
    actor: ActorLike | None,
    capability: Capability | str,
    resource: Any,
    *,
    registry: PolicyRegistry | None = None,
    config: CriteriaConfig | None = None,
) -> bool:
    """Check if *actor* holds *capability* on *resource* and its whole graph.

    The root and every entity reachable from it through loaded
    relationships are checked against their ``(entity type, actor type)``
    policy; the first denial fails the check. Entities without a policy
    pass under the default ``on_missing_policy="allow"``. An anonymous
    actor (``None``) is always allowed.

    Args:
        actor: The acting user, or ``None`` for anonymous callers.
        capability: A ``Capability`` (or its string value).
        resource: An entity, or an iterable of entities. Empty iterables pass.
        registry: Optional custom registry. Defaults to the global registry.
        config: Optional config. Defaults to the global config.

    Returns:
        ``True`` if access is granted, ``False`` if denied.

    Example::

        order = session.get(Order, 1, options=[selectinload(Order.lines)])
        if can(current_user, Capability.GET, order):
            return order
    """
    return walk_graph(actor, capability, resource, registry=registry, config=config).allowed


def authorize(
    actor: ActorLike | None,
    capability: Capability | str,
    resource: Any,
    *,
    registry: PolicyRegistry | None = None,
    config: CriteriaConfig | None = None,
    message: str | None = None,
) -> None:
    """Assert that *actor* holds *capability* on *resource* and its graph.

    Raises :class:`~sqla_criteria.exceptions.AuthorizationDenied` when any
    node is denied.  Returns ``None`` on success.

    Args:
        actor: The acting user, or ``None`` for anonymous callers.
        capability: A ``Capability`` (or its string value).
        resource: An entity, or an iterable of entities.
        registry: Optional custom registry.  Defaults to the global registry.
        config: Optional config. Defaults to the global config.
        message: Optional custom error message for the exception.

    Raises:
        AuthorizationDenied: If any reachable node is denied.

    Example::

        authorize(current_user, Capability.UPDATE, order)  # raises if denied
    """
    decision = walk_graph(actor, capability, resource, registry=registry, config=config)
    if not decision.allowed:
        raise AuthorizationDenied(
            actor=actor,
            capability=Capability(capability).value,
            resource_type=(
                decision.denied_type.__name__
                if decision.denied_type is not None
                else type(resource).__name__
            ),
            resource_id=decision.denied_id,
            message=message,
        )
