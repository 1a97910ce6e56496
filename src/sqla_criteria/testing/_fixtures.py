"""Pytest fixtures for testing sqla-criteria policies and criteria."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from sqla_criteria.config._config import CriteriaConfig
from sqla_criteria.criteria._registry import CriteriaRegistry
from sqla_criteria.policy._registry import PolicyRegistry

__all__ = ["criteria_config", "criteria_registry", "isolated_criteria_state", "policy_registry"]


@pytest.fixture()
def policy_registry() -> Generator[PolicyRegistry, None, None]:
    """Provide a fresh, isolated ``PolicyRegistry`` for each test.

    Example::

        def test_my_policy(policy_registry):
            policy_registry.register(Order, MockActor, OrderPolicy())
            assert policy_registry.has_policy(Order, MockActor)
    """
    yield PolicyRegistry()


@pytest.fixture()
def criteria_registry() -> Generator[CriteriaRegistry, None, None]:
    """Provide a fresh, empty ``CriteriaRegistry`` for each test."""
    yield CriteriaRegistry()


@pytest.fixture()
def criteria_config() -> CriteriaConfig:
    """Provide a default ``CriteriaConfig``."""
    return CriteriaConfig()


@pytest.fixture()
def isolated_criteria_state() -> Generator[tuple[CriteriaConfig, PolicyRegistry], None, None]:
    """Isolate global config and the default policy registry for one test.

    Example::

        def test_something(isolated_criteria_state):
            cfg, registry = isolated_criteria_state
            registry.register(Order, MockActor, OrderPolicy())
    """
    from sqla_criteria.testing._isolation import isolated_criteria

    with isolated_criteria() as state:
        yield state
