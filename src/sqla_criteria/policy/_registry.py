"""PolicyRegistry: stores and resolves policies by (entity type, actor type)."""

from __future__ import annotations

from typing import Any

from sqla_criteria.exceptions import ConfigurationError
from sqla_criteria.policy._base import AuthorizationPolicy, PolicyRegistration

__all__ = ["PolicyRegistry", "get_default_registry"]


class PolicyRegistry:
    """Registry that maps ``(entity type, actor type)`` pairs to policies.

    Lookup is by exact type pair; a policy registered for a base class
    does not apply to subclasses. Populate it at startup; reads need no
    locking afterwards.

    Example::

        registry = PolicyRegistry()
        registry.register(Order, User, OrderPolicy())
        policy = registry.resolve(Order, User)
    """

    def __init__(self) -> None:
        self._policies: dict[tuple[type, type], PolicyRegistration] = {}

    def register(
        self,
        entity_type: type,
        actor_type: type,
        policy: AuthorizationPolicy[Any, Any],
        *,
        name: str | None = None,
        description: str | None = None,
        replace: bool = False,
    ) -> None:
        """Register a policy for an ``(entity type, actor type)`` pair.

        Args:
            entity_type: The entity class.
            actor_type: The acting-user class.
            policy: An ``AuthorizationPolicy`` instance.
            name: Name used in logging. Defaults to the policy class name.
            description: Description. Defaults to the policy class docstring.
            replace: Overwrite an existing registration for the pair.

        Raises:
            ConfigurationError: A key is not a class, the policy is not an
                ``AuthorizationPolicy``, or the pair is already registered
                and *replace* is false.

        Example::

            registry.register(Order, User, OrderPolicy())
        """
        if not isinstance(entity_type, type) or not isinstance(actor_type, type):
            raise ConfigurationError(
                f"Policy key must be a pair of classes, got ({entity_type!r}, {actor_type!r})"
            )
        if not isinstance(policy, AuthorizationPolicy):
            raise ConfigurationError(
                f"Policy for ({entity_type.__name__}, {actor_type.__name__}) must be an "
                f"AuthorizationPolicy instance, got {policy!r}"
            )
        key = (entity_type, actor_type)
        if key in self._policies and not replace:
            raise ConfigurationError(
                f"A policy is already registered for ({entity_type.__name__}, "
                f"{actor_type.__name__}); pass replace=True to override it"
            )
        self._policies[key] = PolicyRegistration(
            entity_type=entity_type,
            actor_type=actor_type,
            policy=policy,
            name=name or type(policy).__name__,
            description=description if description is not None else (type(policy).__doc__ or ""),
        )

    def resolve(self, entity_type: type, actor_type: type) -> AuthorizationPolicy[Any, Any] | None:
        """Return the policy for the exact pair, or ``None`` when absent."""
        registration = self._policies.get((entity_type, actor_type))
        return registration.policy if registration is not None else None

    def lookup(self, entity_type: type, actor_type: type) -> PolicyRegistration | None:
        """Return the full registration for the exact pair, or ``None``."""
        return self._policies.get((entity_type, actor_type))

    def has_policy(self, entity_type: type, actor_type: type) -> bool:
        return (entity_type, actor_type) in self._policies

    def registered_pairs(self) -> set[tuple[type, type]]:
        """Return every registered ``(entity type, actor type)`` pair."""
        return set(self._policies)

    def clear(self) -> None:
        """Remove all registered policies.

        Primarily useful in test teardown to reset the registry state
        between tests.
        """
        self._policies.clear()


# Module-level default registry (singleton).
_default_registry = PolicyRegistry()


def get_default_registry() -> PolicyRegistry:
    """Return the global default (singleton) policy registry.

    This is the registry used by ``@policy``, ``can``, ``authorize`` and
    the search helpers when no explicit registry is provided.
    """
    return _default_registry
