"""sqla-criteria testing utilities: MockActor, assertions, and fixtures.

Provides test helpers for verifying record policies and criteria:

- **MockActor / factories**: Lightweight actors for tests.
- **Assertion helpers**: ``assert_granted``, ``assert_denied``,
  ``assert_compiles_to``.
- **Fixtures**: ``policy_registry``, ``criteria_registry``,
  ``criteria_config``, ``isolated_criteria_state``.

Example::

    from sqla_criteria import Capability
    from sqla_criteria.testing import MockActor, assert_granted

    def test_owner_reads_member(policy_registry, member):
        assert_granted(MockActor(id=member.id), Capability.GET, member, registry=policy_registry)
"""

from sqla_criteria.testing._actors import MockActor, make_admin, make_owner, make_user
from sqla_criteria.testing._assertions import (
    assert_compiles_to,
    assert_denied,
    assert_granted,
)
from sqla_criteria.testing._fixtures import (
    criteria_config,
    criteria_registry,
    isolated_criteria_state,
    policy_registry,
)
from sqla_criteria.testing._isolation import isolated_criteria

__all__ = [
    "MockActor",
    "assert_compiles_to",
    "assert_denied",
    "assert_granted",
    "criteria_config",
    "criteria_registry",
    "isolated_criteria",
    "isolated_criteria_state",
    "make_admin",
    "make_owner",
    "make_user",
    "policy_registry",
]
