"""Shared protocols and type aliases for sqla-criteria."""

from __future__ import annotations

from typing import Literal, Protocol, runtime_checkable

from sqlalchemy import ColumnElement

__all__ = [
    "ActorLike",
    "CycleStrategy",
    "EntityLike",
    "FilterExpression",
    "IncludeStrategy",
    "OnMissingPolicy",
]

# Valid values for CriteriaConfig.on_missing_policy.
OnMissingPolicy = Literal["allow", "deny", "raise"]

# Valid values for CriteriaConfig.cycle_strategy.
CycleStrategy = Literal["grandparent", "path"]

# Valid values for CriteriaConfig.include_strategy.
IncludeStrategy = Literal["selectin", "joined"]


@runtime_checkable
class ActorLike(Protocol):
    """Structural type for the acting user.

    Any object with an ``id`` attribute satisfies this protocol.
    Policies are resolved by the actor's exact runtime type, so
    ``User`` and ``ServiceAccount`` actors can carry different policies
    for the same entity.

    Example::

        @dataclass
        class User:
            id: int
            name: str

        user = User(id=1, name="Alice")
        assert isinstance(user, ActorLike)
    """

    @property
    def id(self) -> int | str: ...


@runtime_checkable
class EntityLike(Protocol):
    """Structural type for nodes of an entity graph.

    Entities are identified by ``(type(entity), entity.id)``.
    """

    @property
    def id(self) -> int | str: ...


# The output type of the predicate builder.
FilterExpression = ColumnElement[bool]
