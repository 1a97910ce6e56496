"""Shared test fixtures for sqla-criteria tests."""

from __future__ import annotations

import datetime

import pytest
from sqlalchemy import Boolean, Date, ForeignKey, Integer, String, create_engine, event
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    Session,
    mapped_column,
    relationship,
    sessionmaker,
)

from sqla_criteria import (
    AuthorizationPolicy,
    CompareOperator,
    SearchCriteria,
    compare,
    criteria,
    ignore,
    include,
)
from sqla_criteria.config._config import _reset_global_config
from sqla_criteria.testing import MockActor
from sqla_criteria.testing._fixtures import (  # noqa: F401
    criteria_config,
    criteria_registry,
    isolated_criteria_state,
    policy_registry,
)

__all__ = [
    "Address",
    "AddressSearch",
    "Base",
    "MemberPolicy",
    "MemberSearch",
    "MockActor",
    "Organization",
    "Member",
    "Post",
    "PostPolicy",
    "PostSearch",
]

# ---------------------------------------------------------------------------
# Test models
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


class Organization(Base):
    __tablename__ = "organizations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))

    members: Mapped[list[Member]] = relationship("Member", back_populates="organization")


class Member(Base):
    __tablename__ = "members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(200))
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    joined_on: Mapped[datetime.date | None] = mapped_column(Date, nullable=True)
    is_deleted: Mapped[bool | None] = mapped_column(Boolean, default=False)
    org_id: Mapped[int | None] = mapped_column(ForeignKey("organizations.id"), nullable=True)

    organization: Mapped[Organization | None] = relationship(
        "Organization", back_populates="members"
    )
    address: Mapped[Address | None] = relationship(
        "Address", back_populates="member", uselist=False
    )
    posts: Mapped[list[Post]] = relationship("Post", back_populates="author")


class Address(Base):
    __tablename__ = "addresses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    city: Mapped[str] = mapped_column(String(100))
    street: Mapped[str] = mapped_column(String(200))
    member_id: Mapped[int] = mapped_column(ForeignKey("members.id"))

    member: Mapped[Member] = relationship("Member", back_populates="address")


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    views: Mapped[int] = mapped_column(Integer, default=0)
    is_published: Mapped[bool] = mapped_column(Boolean, default=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False)
    author_id: Mapped[int] = mapped_column(ForeignKey("members.id"))

    author: Mapped[Member] = relationship("Member", back_populates="posts")


# ---------------------------------------------------------------------------
# Criteria
# ---------------------------------------------------------------------------


@criteria
class AddressSearch:
    city: str | None = compare(CompareOperator.EQUALS)
    street: str | None = None


@criteria
class MemberSearch(SearchCriteria):
    name: str | None = None
    email: str | None = compare(CompareOperator.EQUALS)
    min_age: int | None = compare(CompareOperator.GREATER_OR_EQUAL, attribute="age")
    joined_before: datetime.date | None = compare(
        CompareOperator.LESS_THAN, attribute="joined_on"
    )
    address: AddressSearch | None = None
    note: str | None = ignore()
    include_posts: bool = include()
    include_address: bool = include()


@criteria
class PostSearch(SearchCriteria):
    title: str | None = compare(CompareOperator.CONTAINS)
    title_prefix: str | None = compare(case_sensitive=True, attribute="title")
    min_views: int | None = compare(CompareOperator.GREATER_OR_EQUAL, attribute="views")
    is_published: bool | None = None
    author: MemberSearch | None = None
    include_author: bool = include()


# ---------------------------------------------------------------------------
# Policies (registered per test on a fresh registry)
# ---------------------------------------------------------------------------


class MemberPolicy(AuthorizationPolicy[Member, MockActor]):
    """Members see themselves; admins see everyone."""

    def is_record_owner(self, entity: Member, actor: MockActor) -> bool:
        return entity.id == actor.id or actor.role == "admin"


class PostPolicy(AuthorizationPolicy[Post, MockActor]):
    """Published posts are public; drafts belong to their author."""

    def is_record_owner(self, entity: Post, actor: MockActor) -> bool:
        return entity.author_id == actor.id

    def is_authorized_to_get(self, entity: Post, actor: MockActor) -> bool:
        return entity.is_published or self.is_record_owner(entity, actor)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def _case_sensitive_like(dbapi_connection, connection_record) -> None:
    # SQLite's LIKE ignores ASCII case unless told otherwise.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA case_sensitive_like = ON")
    cursor.close()


@pytest.fixture(autouse=True)
def _reset_config():
    """Every test starts and ends with the default global config."""
    _reset_global_config()
    yield
    _reset_global_config()


@pytest.fixture()
def engine():
    """Create an in-memory SQLite engine with all tables."""
    eng = create_engine("sqlite:///:memory:", echo=False)
    event.listen(eng, "connect", _case_sensitive_like)
    Base.metadata.create_all(eng)
    return eng


@pytest.fixture()
def session(engine):
    """Provide a transactional session that rolls back after each test."""
    factory = sessionmaker(bind=engine)
    sess = factory()
    try:
        yield sess
    finally:
        sess.rollback()
        sess.close()


def seed(session: Session) -> dict[str, list]:
    """Add the sample rows to *session*. Shared by sync and async fixtures."""
    org = Organization(id=1, name="Acme Corp")

    ann = Member(
        id=1,
        name="Ann Lee",
        email="ann@acme.io",
        age=34,
        joined_on=datetime.date(2020, 1, 15),
        org_id=1,
    )
    bob = Member(
        id=2,
        name="Bob Stone",
        email="bob@acme.io",
        age=27,
        joined_on=datetime.date(2021, 6, 1),
        org_id=1,
    )
    annika = Member(
        id=3,
        name="annika Berg",
        email="annika@example.org",
        age=41,
        joined_on=datetime.date(2019, 3, 10),
    )
    dan = Member(
        id=4,
        name="Dan Gone",
        email="dan@acme.io",
        age=50,
        joined_on=datetime.date(2018, 2, 2),
        is_deleted=True,
    )
    real = Member(id=5, name="100% Real", email="real@example.org", age=None, joined_on=None)

    addresses = [
        Address(id=1, city="Lagos", street="1 Marina", member_id=1),
        Address(id=2, city="Nairobi", street="9 Moi Ave", member_id=2),
        Address(id=3, city="LAGOS", street="4 Broad St", member_id=3),
    ]

    posts = [
        Post(id=1, title="Hello World", views=10, is_published=True, author_id=1),
        Post(id=2, title="Draft notes", views=0, is_published=False, author_id=1),
        Post(id=3, title="World Cup recap", views=250, is_published=True, author_id=2),
        Post(
            id=4,
            title="Old news",
            views=5,
            is_published=True,
            is_deleted=True,
            author_id=2,
        ),
    ]

    members = [ann, bob, annika, dan, real]
    session.add(org)
    session.add_all(members)
    session.add_all(addresses)
    session.add_all(posts)
    return {
        "organizations": [org],
        "members": members,
        "addresses": addresses,
        "posts": posts,
    }


@pytest.fixture()
def sample_data(session: Session) -> dict[str, list]:
    """Seed the database; tests start from an empty identity map."""
    data = seed(session)
    session.commit()
    session.expunge_all()
    return data
