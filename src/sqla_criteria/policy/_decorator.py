"""@policy decorator: register authorization policy classes."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from sqla_criteria.policy._base import AuthorizationPolicy
from sqla_criteria.policy._registry import PolicyRegistry, get_default_registry

__all__ = ["policy"]

P = TypeVar("P", bound=type[AuthorizationPolicy[Any, Any]])


def policy(
    entity_type: type,
    actor_type: type,
    *,
    registry: PolicyRegistry | None = None,
    replace: bool = False,
) -> Callable[[P], P]:
    """Class decorator that registers a policy for ``(entity_type, actor_type)``.

    The class is instantiated without arguments once, at decoration time.

    Args:
        entity_type: The entity class.
        actor_type: The acting-user class.
        registry: Optional custom registry. Defaults to the global registry.
        replace: Overwrite an existing registration for the pair.

    Returns:
        A decorator that registers the class and returns it unchanged.

    Example::

        @policy(Order, User)
        class OrderPolicy(AuthorizationPolicy[Order, User]):
            \"\"\"Customers see their own orders.\"\"\"

            def is_record_owner(self, entity: Order, actor: User) -> bool:
                return entity.customer_id == actor.id
    """

    def decorator(cls: P) -> P:
        target = registry if registry is not None else get_default_registry()
        target.register(
            entity_type,
            actor_type,
            cls(),
            name=cls.__name__,
            description=cls.__doc__ or "",
            replace=replace,
        )
        return cls

    return decorator
