"""Data models for explain/dry-run output."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = ["AccessExplanation", "CriteriaExplanation"]


@dataclass(frozen=True, slots=True)
class CriteriaExplanation:
    """How a criteria value would shape a SELECT against a model.

    Attributes:
        model_name: Short class name of the queried model.
        criteria_type: Short class name of the criteria (``"None"`` if absent).
        predicates: Human-readable predicates, in application order.
        includes: Dotted include paths.
        order_fields: ``"<field> <direction>"`` entries.
        soft_delete_filter: Whether soft-deleted rows are excluded.
        sql: The shaped SQL, with literal binds where the dialect allows.
    """

    model_name: str
    criteria_type: str
    predicates: list[str]
    includes: list[str]
    order_fields: list[str]
    soft_delete_filter: bool
    sql: str

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return {
            "model_name": self.model_name,
            "criteria_type": self.criteria_type,
            "predicates": list(self.predicates),
            "includes": list(self.includes),
            "order_fields": list(self.order_fields),
            "soft_delete_filter": self.soft_delete_filter,
            "sql": self.sql,
        }

    def __str__(self) -> str:
        """Return a human-readable multi-line explanation."""
        lines: list[str] = []
        lines.append(f"Criteria Explanation for {self.criteria_type} on {self.model_name}")
        if self.predicates:
            lines.append("  Predicates:")
            for p in self.predicates:
                lines.append(f"    - {p}")
        else:
            lines.append("  Predicates: none")
        if self.includes:
            lines.append(f"  Includes: {', '.join(self.includes)}")
        if self.order_fields:
            lines.append(f"  Order: {', '.join(self.order_fields)}")
        if self.soft_delete_filter:
            lines.append("  Soft-deleted rows excluded")
        lines.append("")
        lines.append(f"  SQL: {self.sql}")
        return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class AccessExplanation:
    """Why an actor can or cannot exercise a capability over an entity graph.

    Attributes:
        actor_repr: String representation of the actor.
        capability: The capability checked.
        resource_type: Short class name of the root (or ``"list"``).
        allowed: Whether access is allowed overall.
        nodes_checked: Number of entities whose policy was evaluated.
        unguarded_types: Entity types visited without a registered policy.
        denied_type: Short class name of the denying entity, if any.
        denied_id: ``repr`` of the denying entity's id, if any.
        denied_path: Attribute path from the root to the denying entity.
    """

    actor_repr: str
    capability: str
    resource_type: str
    allowed: bool
    nodes_checked: int
    unguarded_types: list[str]
    denied_type: str | None
    denied_id: str | None
    denied_path: str

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return {
            "actor_repr": self.actor_repr,
            "capability": self.capability,
            "resource_type": self.resource_type,
            "allowed": self.allowed,
            "nodes_checked": self.nodes_checked,
            "unguarded_types": list(self.unguarded_types),
            "denied_type": self.denied_type,
            "denied_id": self.denied_id,
            "denied_path": self.denied_path,
        }

    def __str__(self) -> str:
        """Return a human-readable multi-line explanation."""
        verdict = "ALLOWED" if self.allowed else "DENIED"
        lines: list[str] = []
        lines.append(f"Access Check: {verdict}")
        lines.append(f"  Actor: {self.actor_repr}")
        lines.append(f"  Capability: {self.capability}")
        lines.append(f"  Resource: {self.resource_type}")
        lines.append(f"  Nodes checked: {self.nodes_checked}")
        if self.unguarded_types:
            lines.append(f"  No policy registered for: {', '.join(self.unguarded_types)}")
        if not self.allowed and self.denied_type is not None:
            lines.append(
                f"  Denied by {self.denied_type}(id={self.denied_id}) "
                f"at {self.denied_path or '<root>'}"
            )
        return "\n".join(lines)
