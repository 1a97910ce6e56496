"""Tests for explain_access()."""

from __future__ import annotations

import pytest
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from sqla_criteria.explain._access import explain_access
from sqla_criteria.explain._models import AccessExplanation
from sqla_criteria.policy._base import Capability
from sqla_criteria.policy._registry import PolicyRegistry
from tests.conftest import Member, MemberPolicy, MockActor, Post, PostPolicy


@pytest.fixture()
def registry() -> PolicyRegistry:
    reg = PolicyRegistry()
    reg.register(Member, MockActor, MemberPolicy())
    reg.register(Post, MockActor, PostPolicy())
    return reg


def _member(session, member_id: int) -> Member:
    return session.scalars(
        select(Member).where(Member.id == member_id).options(selectinload(Member.posts))
    ).one()


class TestExplainAccess:
    def test_allowed(self, session, sample_data, registry) -> None:
        member = _member(session, 1)
        result = explain_access(MockActor(id=1), Capability.GET, member, registry=registry)
        assert isinstance(result, AccessExplanation)
        assert result.allowed is True
        assert result.capability == "get"
        assert result.resource_type == "Member"
        assert result.nodes_checked == 3
        assert result.denied_type is None
        assert result.denied_id is None

    def test_denied_reports_node(self, session, sample_data, registry) -> None:
        admin = MockActor(id=99, role="admin")
        result = explain_access(admin, Capability.GET, _member(session, 1), registry=registry)
        assert result.allowed is False
        assert result.denied_type == "Post"
        assert result.denied_id == "2"
        assert result.denied_path.startswith("posts[")

    def test_unguarded_types(self, session, sample_data) -> None:
        reg = PolicyRegistry()
        reg.register(Member, MockActor, MemberPolicy())
        result = explain_access(MockActor(id=1), Capability.GET, _member(session, 1), registry=reg)
        assert result.allowed is True
        assert result.unguarded_types == ["Post"]

    def test_string_capability(self, session, sample_data, registry) -> None:
        member = session.get(Member, 1)
        result = explain_access(MockActor(id=2), "delete", member, registry=registry)
        assert result.capability == "delete"
        assert result.allowed is False
        assert result.denied_path == ""

    def test_collection_resource(self, registry) -> None:
        result = explain_access(MockActor(id=1), Capability.GET, [], registry=registry)
        assert result.allowed is True
        assert result.resource_type == "list"
