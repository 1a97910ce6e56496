"""Policy engine: registration and lookup of record-level policies."""

from sqla_criteria.policy._base import AuthorizationPolicy, Capability, PolicyRegistration
from sqla_criteria.policy._decorator import policy
from sqla_criteria.policy._registry import PolicyRegistry, get_default_registry

__all__ = [
    "AuthorizationPolicy",
    "Capability",
    "PolicyRegistration",
    "PolicyRegistry",
    "get_default_registry",
    "policy",
]
