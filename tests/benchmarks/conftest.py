"""Benchmark fixtures: object graphs, registries and populated sessions."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from sqla_criteria.policy._base import AuthorizationPolicy
from sqla_criteria.policy._registry import PolicyRegistry
from sqla_criteria.testing import MockActor
from tests.conftest import Base, Member, Post, PostPolicy

# ---------------------------------------------------------------------------
# Plain object graph for walker benchmarks
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class BenchLine:
    id: int
    owner_id: int = 1


@dataclass(eq=False)
class BenchOrder:
    id: int
    owner_id: int = 1
    lines: list[BenchLine] = field(default_factory=list)


@dataclass(eq=False)
class BenchCustomer:
    id: int
    owner_id: int = 1
    orders: list[BenchOrder] = field(default_factory=list)


class BenchOwnerPolicy(AuthorizationPolicy[object, MockActor]):
    def is_record_owner(self, entity, actor: MockActor) -> bool:
        return entity.owner_id == actor.id


def make_customer(orders: int, lines_per_order: int) -> BenchCustomer:
    """Build a customer with ``orders * lines_per_order`` lines, all owned by actor 1."""
    customer = BenchCustomer(id=1)
    line_id = 0
    for order_id in range(1, orders + 1):
        order = BenchOrder(id=order_id)
        for _ in range(lines_per_order):
            line_id += 1
            order.lines.append(BenchLine(id=line_id))
        customer.orders.append(order)
    return customer


@pytest.fixture()
def mock_actor() -> MockActor:
    """Default benchmark actor."""
    return MockActor(id=1)


@pytest.fixture()
def graph_registry() -> PolicyRegistry:
    reg = PolicyRegistry()
    for entity_type in (BenchCustomer, BenchOrder, BenchLine):
        reg.register(entity_type, MockActor, BenchOwnerPolicy())
    return reg


@pytest.fixture()
def post_registry() -> PolicyRegistry:
    reg = PolicyRegistry()
    reg.register(Post, MockActor, PostPolicy())
    return reg


# ---------------------------------------------------------------------------
# Populated database
# ---------------------------------------------------------------------------


def _seed_posts(engine, count: int) -> None:
    """Bulk-insert *count* published posts spread over ten members."""
    Base.metadata.create_all(engine)
    sess = sessionmaker(bind=engine)()
    try:
        sess.add_all(
            Member(id=i, name=f"Member {i}", email=f"m{i}@example.org", age=20 + i)
            for i in range(1, 11)
        )
        sess.flush()
        rows = [
            {
                "id": i,
                "title": f"Post {i}",
                "views": i,
                "is_published": True,
                "is_deleted": i % 10 == 0,
                "author_id": (i % 10) + 1,
            }
            for i in range(1, count + 1)
        ]
        sess.execute(Post.__table__.insert(), rows)
        sess.commit()
    except Exception:
        sess.rollback()
        raise
    finally:
        sess.close()


@pytest.fixture(scope="module")
def populated_engine_1k():
    """SQLite engine pre-loaded with 1,000 posts."""
    eng = create_engine("sqlite:///:memory:", echo=False)
    _seed_posts(eng, 1_000)
    return eng


@pytest.fixture()
def populated_session_1k(populated_engine_1k):
    """Session over the 1K-row database."""
    sess = sessionmaker(bind=populated_engine_1k)()
    try:
        yield sess
    finally:
        sess.close()
