"""Relationship traversal: dotted paths to EXISTS subqueries and loader options."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import ColumnElement
from sqlalchemy.inspection import inspect as sa_inspect
from sqlalchemy.orm import (
    Mapper,
    RelationshipDirection,
    RelationshipProperty,
    joinedload,
    selectinload,
)

from sqla_criteria._types import IncludeStrategy
from sqla_criteria.exceptions import UnknownFieldError

if TYPE_CHECKING:
    from sqlalchemy.orm.attributes import InstrumentedAttribute
    from sqlalchemy.orm.interfaces import LoaderOption

__all__ = ["build_loader_option", "resolve_column", "traverse_relationship_path"]


def _relationship(model: type, name: str, full_path: str) -> RelationshipProperty[Any]:
    mapper: Mapper[Any] = sa_inspect(model)
    prop = mapper.relationships.get(name)
    if prop is None:
        raise UnknownFieldError(model=model.__name__, path=full_path)
    return prop


def resolve_column(model: type, path: list[str], full_path: str) -> InstrumentedAttribute[Any]:
    """Follow *path* through relationships and return the leaf column attribute.

    Raises:
        UnknownFieldError: A segment is not a relationship, or the leaf is
            not a column attribute of the final model.
    """
    *hops, leaf = path
    target = model
    for hop in hops:
        target = _relationship(target, hop, full_path).mapper.class_
    mapper: Mapper[Any] = sa_inspect(target)
    if leaf not in mapper.column_attrs:
        raise UnknownFieldError(model=model.__name__, path=full_path)
    return getattr(target, leaf)


def traverse_relationship_path(
    model: type,
    path: list[str],
    leaf_condition: ColumnElement[bool],
) -> ColumnElement[bool]:
    """Traverse a chain of relationships and wrap in EXISTS subqueries.

    Uses ``has()`` for MANYTOONE relationships and ``any()`` for
    ONETOMANY / MANYTOMANY relationships, producing nested EXISTS
    subqueries.

    Args:
        model: The starting SQLAlchemy model class.
        path: List of relationship attribute names to traverse.
        leaf_condition: The filter condition to apply at the end of the path.

    Returns:
        A ``ColumnElement[bool]`` with nested EXISTS subqueries.

    Example::

        # Member -> address, where address.city == "Lagos"
        expr = traverse_relationship_path(Member, ["address"], Address.city == "Lagos")
        # EXISTS (SELECT 1 FROM addresses
        #   WHERE members.id = addresses.member_id AND addresses.city = 'Lagos')
    """
    if not path:
        return leaf_condition

    attr_name = path[0]
    prop = _relationship(model, attr_name, ".".join(path))
    relationship_attr: Any = getattr(model, attr_name)
    target_model: type = prop.mapper.class_
    inner = traverse_relationship_path(target_model, path[1:], leaf_condition)

    if prop.direction is RelationshipDirection.MANYTOONE or not prop.uselist:
        result: ColumnElement[bool] = relationship_attr.has(inner)
    else:
        result = relationship_attr.any(inner)
    return result


def build_loader_option(model: type, include_path: str, strategy: IncludeStrategy) -> LoaderOption:
    """Build a chained eager-loading option for a dotted include path.

    Example::

        stmt = select(Member).options(
            build_loader_option(Member, "posts.tags", "selectin")
        )
        # selectinload(Member.posts).selectinload(Post.tags)
    """
    option: Any = None
    target = model
    for name in include_path.split("."):
        prop = _relationship(target, name, include_path)
        attr = getattr(target, name)
        if strategy == "selectin":
            option = selectinload(attr) if option is None else option.selectinload(attr)
        else:
            option = joinedload(attr) if option is None else option.joinedload(attr)
        target = prop.mapper.class_
    if option is None:
        raise UnknownFieldError(model=model.__name__, path=include_path)
    return option
