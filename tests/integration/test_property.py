"""Hypothesis property tests for criteria compilation and graph checks."""

from __future__ import annotations

from dataclasses import dataclass, field

from hypothesis import given, settings
from hypothesis import strategies as st
from sqlalchemy import Boolean, Integer, String, create_engine, select
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

from sqla_criteria._checks import can
from sqla_criteria.compiler._query import apply_criteria
from sqla_criteria.criteria._base import OrderField, Pagination, SearchCriteria
from sqla_criteria.criteria._fields import CompareOperator, compare
from sqla_criteria.criteria._registry import CriteriaRegistry, criteria
from sqla_criteria.policy._base import AuthorizationPolicy, Capability
from sqla_criteria.policy._registry import PolicyRegistry
from sqla_criteria.session._search import search
from sqla_criteria.testing._actors import MockActor

# ---------------------------------------------------------------------------
# Isolated models for property tests (avoids conftest coupling)
# ---------------------------------------------------------------------------


class PropBase(DeclarativeBase):
    pass


class PropItem(PropBase):
    __tablename__ = "prop_items"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    rank: Mapped[int] = mapped_column(Integer)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False)


_registry = CriteriaRegistry()


@criteria(registry=_registry)
class PropSearch(SearchCriteria):
    name: str | None = None
    name_contains: str | None = compare(CompareOperator.CONTAINS, attribute="name")
    min_rank: int | None = compare(CompareOperator.GREATER_OR_EQUAL, attribute="rank")


def _make_session():
    """Create a fresh in-memory SQLite engine and session."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    PropBase.metadata.create_all(engine)
    return sessionmaker(bind=engine)()


_session = _make_session()

_text = st.text(alphabet="abAB%_/ ", max_size=6)
_rows = st.lists(
    st.tuples(_text, st.integers(min_value=0, max_value=20), st.booleans()),
    max_size=12,
)


def _load(rows: list[tuple[str, int, bool]]) -> None:
    _session.rollback()
    _session.add_all(
        PropItem(id=i + 1, name=name, rank=rank, is_deleted=deleted)
        for i, (name, rank, deleted) in enumerate(rows)
    )
    _session.flush()


def _ids(criteria_value: PropSearch) -> set[int]:
    stmt = apply_criteria(select(PropItem), PropItem, criteria_value, registry=_registry)
    return {item.id for item in _session.scalars(stmt)}


class TestTextMatching:
    """Text filters agree with Python's own string matching, wildcards included."""

    @given(rows=_rows, needle=_text.filter(bool))
    @settings(max_examples=60, deadline=None)
    def test_starts_with_ignores_case(self, rows, needle) -> None:
        _load(rows)
        expected = {
            i + 1
            for i, (name, _, deleted) in enumerate(rows)
            if not deleted and name.lower().startswith(needle.lower())
        }
        assert _ids(PropSearch(name=needle)) == expected

    @given(rows=_rows, needle=_text.filter(bool))
    @settings(max_examples=60, deadline=None)
    def test_contains_ignores_case(self, rows, needle) -> None:
        _load(rows)
        expected = {
            i + 1
            for i, (name, _, deleted) in enumerate(rows)
            if not deleted and needle.lower() in name.lower()
        }
        assert _ids(PropSearch(name_contains=needle)) == expected


class TestSoundness:
    """Every returned row satisfies every predicate."""

    @given(rows=_rows, min_rank=st.integers(min_value=0, max_value=20))
    @settings(max_examples=40, deadline=None)
    def test_min_rank(self, rows, min_rank) -> None:
        _load(rows)
        expected = {
            i + 1 for i, (_, rank, deleted) in enumerate(rows) if not deleted and rank >= min_rank
        }
        assert _ids(PropSearch(min_rank=min_rank)) == expected


class TestPagination:
    """Pages partition the ordered result and the total never depends on the page."""

    @given(rows=_rows, take=st.integers(min_value=1, max_value=5))
    @settings(max_examples=30, deadline=None)
    def test_pages_partition_results(self, rows, take) -> None:
        _load(rows)
        live = [i + 1 for i, (_, _, deleted) in enumerate(rows) if not deleted]
        seen: list[int] = []
        page_count = max(1, -(-len(live) // take))
        for page_number in range(1, page_count + 1):
            page = Pagination(take=take, page=page_number, order_fields=[OrderField(field="id")])
            result = search(
                _session, PropItem, PropSearch(pagination=page), criteria_registry=_registry
            )
            assert page.total_records == len(live)
            seen.extend(item.id for item in result.items)
        assert seen == live


# ---------------------------------------------------------------------------
# Graph checks
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class Node:
    id: int
    owner_id: int
    children: list[Node] = field(default_factory=list)


class NodePolicy(AuthorizationPolicy[Node, MockActor]):
    def is_record_owner(self, entity: Node, actor: MockActor) -> bool:
        return entity.owner_id == actor.id


_policies = PolicyRegistry()
_policies.register(Node, MockActor, NodePolicy())


def _tree(owners: list[int]) -> Node:
    nodes = [Node(id=i, owner_id=owner) for i, owner in enumerate(owners)]
    for i, node in enumerate(nodes[1:], start=1):
        nodes[(i - 1) // 2].children.append(node)
    return nodes[0]


class TestGraphSoundness:
    """A graph passes iff every node passes."""

    @given(owners=st.lists(st.integers(min_value=1, max_value=3), min_size=1, max_size=15))
    @settings(max_examples=100, deadline=None)
    def test_all_nodes_must_pass(self, owners) -> None:
        actor = MockActor(id=1)
        expected = all(owner == actor.id for owner in owners)
        assert can(actor, Capability.GET, _tree(owners), registry=_policies) is expected
