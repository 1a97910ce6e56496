"""Graph walker: apply record-level policies across an entity object graph.

Starting from a root entity (or collection), every entity reachable
through loaded relationships / attributes is checked against the policy
registered for ``(type(entity), type(actor))``. The walk stops at the
first denial.

Cycle avoidance is configurable:

- ``"grandparent"``: a child identical to the node two hops back is
  skipped. This ends A -> B -> A back-references but not longer cycles.
- ``"path"``: a child already present on the current traversal path is
  skipped, which ends cycles of any length.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import InstanceState

from sqla_criteria._types import ActorLike
from sqla_criteria.config._config import CriteriaConfig, get_global_config
from sqla_criteria.exceptions import NoPolicyError
from sqla_criteria.policy._base import Capability
from sqla_criteria.policy._registry import PolicyRegistry, get_default_registry

__all__ = ["GraphDecision", "iter_children", "same_entity", "walk_graph"]

logger = logging.getLogger(__name__)

_COLLECTION_TYPES = (list, tuple, set, frozenset)


@dataclass(frozen=True, slots=True)
class GraphDecision:
    """Outcome of one graph walk.

    Attributes:
        allowed: Whether every visited node passed.
        nodes_checked: Number of entities checked (skipped ones excluded).
        unguarded: Entity type names visited without a registered policy.
        denied_type: Type of the denying entity, if any.
        denied_id: Identity of the denying entity, if any.
        denied_path: Attribute path from the root to the denying entity.
    """

    allowed: bool
    nodes_checked: int = 0
    unguarded: tuple[str, ...] = ()
    denied_type: type | None = None
    denied_id: Any = None
    denied_path: str = ""


def _is_entity(value: Any) -> bool:
    return not isinstance(value, type) and hasattr(value, "id")


def same_entity(a: Any, b: Any) -> bool:
    """Identity comparison: same object, or same runtime type and same ``id``."""
    if a is None or b is None:
        return False
    if a is b:
        return True
    a_id = getattr(a, "id", None)
    return type(a) is type(b) and a_id is not None and a_id == getattr(b, "id", None)


def _identity_key(entity: Any) -> tuple[type, Any]:
    entity_id = getattr(entity, "id", None)
    return (type(entity), entity_id if entity_id is not None else ("object", id(entity)))


def iter_children(entity: Any) -> Iterator[tuple[str, Any]]:
    """Yield ``(attribute name, value)`` pairs that may hold child entities.

    Mapped SQLAlchemy instances yield only relationships that are already
    loaded, so the walk never triggers lazy loads. Dataclasses yield their
    fields; other objects their public instance attributes.
    """
    state = sa_inspect(entity, raiseerr=False)
    if isinstance(state, InstanceState):
        for rel in state.mapper.relationships:
            if rel.key in state.dict:
                yield rel.key, state.dict[rel.key]
        return
    if dataclasses.is_dataclass(entity):
        for f in dataclasses.fields(entity):
            yield f.name, getattr(entity, f.name)
        return
    if not hasattr(entity, "__dict__"):
        return
    for name, value in vars(entity).items():
        if not name.startswith("_"):
            yield name, value


class _GraphWalker:
    def __init__(
        self,
        capability: Capability,
        actor: ActorLike,
        registry: PolicyRegistry,
        config: CriteriaConfig,
    ) -> None:
        self.capability = capability
        self.actor = actor
        self.registry = registry
        self.config = config
        self.nodes_checked = 0
        self.unguarded: list[str] = []
        self.denied: tuple[type, Any, str] | None = None

    def visit_value(
        self,
        value: Any,
        path: str,
        parent: Any,
        grandparent: Any,
        trail: frozenset[tuple[type, Any]],
    ) -> bool:
        if value is None:
            return True
        if _is_entity(value):
            return self.visit_entity(value, path, parent, grandparent, trail)
        if isinstance(value, Mapping):
            items: Iterable[Any] = value.values()
        elif isinstance(value, _COLLECTION_TYPES):
            items = value
        else:
            return True
        for index, item in enumerate(items):
            if not _is_entity(item):
                continue
            if not self.visit_entity(item, f"{path}[{index}]", parent, grandparent, trail):
                return False
        return True

    def _is_cycle(self, entity: Any, grandparent: Any, trail: frozenset[tuple[type, Any]]) -> bool:
        if self.config.cycle_strategy == "path":
            return _identity_key(entity) in trail
        return same_entity(entity, grandparent)

    def visit_entity(
        self,
        entity: Any,
        path: str,
        parent: Any,
        grandparent: Any,
        trail: frozenset[tuple[type, Any]],
    ) -> bool:
        if self._is_cycle(entity, grandparent, trail):
            return True

        self.nodes_checked += 1
        policy = self.registry.resolve(type(entity), type(self.actor))
        if policy is None:
            allowed = self._missing_policy(entity)
        else:
            allowed = policy.check(self.capability, entity, self.actor)

        if self.config.log_policy_decisions:
            from sqla_criteria._audit import log_policy_decision

            log_policy_decision(
                entity=entity,
                capability=self.capability.value,
                actor=self.actor,
                policy=policy,
                allowed=allowed,
                path=path,
            )

        if not allowed:
            self.denied = (type(entity), getattr(entity, "id", None), path)
            logger.debug(
                "%s denied on %s(id=%r) at %s",
                self.capability.value,
                type(entity).__name__,
                getattr(entity, "id", None),
                path or "<root>",
            )
            return False

        child_trail = trail | {_identity_key(entity)}
        for name, child in iter_children(entity):
            child_path = f"{path}.{name}" if path else name
            if not self.visit_value(child, child_path, entity, parent, child_trail):
                return False
        return True

    def _missing_policy(self, entity: Any) -> bool:
        mode = self.config.on_missing_policy
        if mode == "raise":
            raise NoPolicyError(
                resource_type=type(entity).__name__,
                actor_type=type(self.actor).__name__,
            )
        if mode == "deny":
            return False
        name = type(entity).__name__
        if name not in self.unguarded:
            self.unguarded.append(name)
        return True


def walk_graph(
    actor: ActorLike | None,
    capability: Capability | str,
    resource: Any,
    *,
    registry: PolicyRegistry | None = None,
    config: CriteriaConfig | None = None,
) -> GraphDecision:
    """Check *capability* over *resource* and everything reachable from it.

    Args:
        actor: The acting user. ``None`` (anonymous) is always allowed.
        capability: The capability to check on every node.
        resource: A root entity, or an iterable of root entities.
        registry: Optional custom registry. Defaults to the global registry.
        config: Optional config. Defaults to the global config.

    Returns:
        A ``GraphDecision``; ``allowed`` is true iff every reachable,
        non-skipped node passed (or had no policy under ``"allow"``).

    Raises:
        NoPolicyError: A node has no policy and ``on_missing_policy`` is
            ``"raise"``.
    """
    cap = Capability(capability)
    if actor is None or resource is None:
        return GraphDecision(allowed=True)

    walker = _GraphWalker(
        cap,
        actor,
        registry if registry is not None else get_default_registry(),
        config if config is not None else get_global_config(),
    )
    if _is_entity(resource):
        allowed = walker.visit_entity(resource, "", None, None, frozenset())
    else:
        roots = list(resource.values() if isinstance(resource, Mapping) else resource)
        allowed = walker.visit_value(roots, "", None, None, frozenset())

    denied_type, denied_id, denied_path = walker.denied or (None, None, "")
    return GraphDecision(
        allowed=allowed,
        nodes_checked=walker.nodes_checked,
        unguarded=tuple(walker.unguarded),
        denied_type=denied_type,
        denied_id=denied_id,
        denied_path=denied_path,
    )

