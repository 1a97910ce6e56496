"""AuthorizationPolicy base class and PolicyRegistration metadata."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

__all__ = ["AuthorizationPolicy", "Capability", "PolicyRegistration"]

EntityT = TypeVar("EntityT")
ActorT = TypeVar("ActorT")


class Capability(str, Enum):
    """Record-level capabilities checked by the graph walker."""

    RECORD_OWNER = "record_owner"
    ADD = "add"
    GET = "get"
    UPDATE = "update"
    DELETE = "delete"


_CAPABILITY_METHODS: dict[Capability, str] = {
    Capability.RECORD_OWNER: "is_record_owner",
    Capability.ADD: "is_authorized_to_add",
    Capability.GET: "is_authorized_to_get",
    Capability.UPDATE: "is_authorized_to_update",
    Capability.DELETE: "is_authorized_to_delete",
}


class AuthorizationPolicy(Generic[EntityT, ActorT]):
    """Record-level policy for one ``(entity type, actor type)`` pair.

    Every capability delegates to ``is_record_owner`` unless overridden,
    and ``is_record_owner`` allows by default.

    Example::

        class OrderPolicy(AuthorizationPolicy[Order, User]):
            def is_record_owner(self, entity: Order, actor: User) -> bool:
                return entity.customer_id == actor.id

            def is_authorized_to_delete(self, entity: Order, actor: User) -> bool:
                return actor.role == "admin"
    """

    def is_record_owner(self, entity: EntityT, actor: ActorT) -> bool:
        return True

    def is_authorized_to_add(self, entity: EntityT, actor: ActorT) -> bool:
        return self.is_record_owner(entity, actor)

    def is_authorized_to_get(self, entity: EntityT, actor: ActorT) -> bool:
        return self.is_record_owner(entity, actor)

    def is_authorized_to_update(self, entity: EntityT, actor: ActorT) -> bool:
        return self.is_record_owner(entity, actor)

    def is_authorized_to_delete(self, entity: EntityT, actor: ActorT) -> bool:
        return self.is_record_owner(entity, actor)

    def check(self, capability: Capability | str, entity: EntityT, actor: ActorT) -> bool:
        """Dispatch to the method implementing *capability*."""
        method = getattr(self, _CAPABILITY_METHODS[Capability(capability)])
        return bool(method(entity, actor))


@dataclass(frozen=True, slots=True)
class PolicyRegistration:
    """A registered policy with its metadata.

    Attributes:
        entity_type: The entity class this policy applies to.
        actor_type: The acting-user class this policy applies to.
        policy: The policy instance.
        name: Policy name (for debugging/logging).
        description: Human-readable description (from docstring).
    """

    entity_type: type
    actor_type: type
    policy: AuthorizationPolicy[Any, Any]
    name: str
    description: str
