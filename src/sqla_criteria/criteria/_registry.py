"""CriteriaRegistry: static field metadata for criteria classes.

Criteria classes are resolved once, when ``@criteria`` runs, into a
``CriteriaSchema``: an ordered tuple of ``FieldSpec`` objects. The
compiler only reads schemas; it never inspects annotations per call.
"""

from __future__ import annotations

import dataclasses
import datetime
import decimal
import logging
import types
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar, Union, get_args, get_origin, get_type_hints, overload

from sqla_criteria.criteria._fields import (
    METADATA_KEY,
    SCALAR_OPERATORS,
    TEXT_OPERATORS,
    FieldKind,
    FieldMetadata,
    FieldSpec,
)
from sqla_criteria.exceptions import ConfigurationError, OperatorMismatchError

__all__ = [
    "CriteriaRegistry",
    "CriteriaSchema",
    "criteria",
    "get_default_criteria_registry",
    "resolve_field_metadata",
]

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=type)

_SCALAR_TYPES: tuple[type, ...] = (
    bool,
    int,
    float,
    decimal.Decimal,
    datetime.date,
    datetime.datetime,
    datetime.time,
    datetime.timedelta,
    uuid.UUID,
    Enum,
)


@dataclass(frozen=True, slots=True)
class CriteriaSchema:
    """Resolved field list of one criteria class.

    Attributes:
        criteria_type: The registered dataclass.
        fields: Field specs in declaration order (inherited fields first).
    """

    criteria_type: type
    fields: tuple[FieldSpec, ...]

    def field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise ConfigurationError(f"{self.criteria_type.__name__} has no criteria field {name!r}")


def _unwrap_optional(hint: Any) -> tuple[Any, bool]:
    """Strip ``None`` from a union. Returns ``(type, optional)``."""
    origin = get_origin(hint)
    if origin is Union or origin is types.UnionType:
        args = get_args(hint)
        non_none = [a for a in args if a is not type(None)]
        optional = len(non_none) < len(args)
        if len(non_none) == 1:
            return non_none[0], optional
        return hint, optional
    return hint, False


def _is_class(hint: Any) -> bool:
    return isinstance(hint, type) and get_origin(hint) is None


def _zero_value(python_type: Any, optional: bool) -> Any:
    if optional or not _is_class(python_type):
        return None
    try:
        return python_type()
    except (TypeError, ValueError):
        return None


def _check_operator(name: str, kind: FieldKind, metadata: FieldMetadata) -> None:
    op = metadata.operator
    if op is None:
        return
    if kind is FieldKind.TEXT and op not in TEXT_OPERATORS:
        raise OperatorMismatchError(field=name, operator=op, kind=kind.value)
    if kind is FieldKind.SCALAR and op not in SCALAR_OPERATORS:
        raise OperatorMismatchError(field=name, operator=op, kind=kind.value)
    if kind in (FieldKind.NESTED, FieldKind.INCLUDE, FieldKind.OPAQUE):
        raise OperatorMismatchError(field=name, operator=op, kind=kind.value)


class CriteriaRegistry:
    """Registry that maps criteria classes to their resolved schemas.

    Populated at import time by ``@criteria``; read-only afterwards.

    Example::

        registry = CriteriaRegistry()
        registry.register(MemberSearch)
        schema = registry.schema_for(MemberSearch)
    """

    def __init__(self) -> None:
        self._schemas: dict[type, CriteriaSchema] = {}
        self._pending: set[type] = set()

    def register(self, criteria_type: type) -> CriteriaSchema:
        """Resolve and store the schema of a criteria dataclass.

        Nested criteria dataclasses referenced by compared fields are
        registered on demand.

        Args:
            criteria_type: A dataclass type.

        Returns:
            The resolved ``CriteriaSchema``.

        Raises:
            ConfigurationError: The class is not a dataclass, a field has
                an unsupported type, or an include flag is not a bool.
            OperatorMismatchError: An operator does not fit its field kind.
        """
        if not (isinstance(criteria_type, type) and dataclasses.is_dataclass(criteria_type)):
            raise ConfigurationError(f"Criteria type must be a dataclass, got {criteria_type!r}")
        existing = self._schemas.get(criteria_type)
        if existing is not None:
            return existing

        self._pending.add(criteria_type)
        try:
            hints = get_type_hints(criteria_type)
            specs = tuple(
                self._resolve_field(criteria_type, f, hints[f.name])
                for f in dataclasses.fields(criteria_type)
            )
        finally:
            self._pending.discard(criteria_type)

        schema = CriteriaSchema(criteria_type=criteria_type, fields=specs)
        self._schemas[criteria_type] = schema
        logger.debug(
            "Registered criteria %s with fields %s",
            criteria_type.__name__,
            [s.name for s in specs],
        )
        return schema

    def _resolve_field(self, owner: type, f: dataclasses.Field[Any], hint: Any) -> FieldSpec:
        metadata: FieldMetadata = f.metadata.get(METADATA_KEY, FieldMetadata())
        python_type, optional = _unwrap_optional(hint)
        qualified = f"{owner.__name__}.{f.name}"
        compared = metadata.always_compare or not metadata.ignore

        if metadata.include:
            if python_type is not bool:
                raise ConfigurationError(f"Include flag {qualified} must be declared as bool")
            kind = FieldKind.INCLUDE
        elif python_type is str:
            kind = FieldKind.TEXT
        elif _is_class(python_type) and issubclass(python_type, _SCALAR_TYPES):
            kind = FieldKind.SCALAR
        elif _is_class(python_type) and dataclasses.is_dataclass(python_type):
            kind = FieldKind.NESTED
            if compared and python_type not in self._pending:
                self.register(python_type)
        else:
            kind = FieldKind.OPAQUE
            if compared:
                raise ConfigurationError(
                    f"Unsupported criteria field type {hint!r} on {qualified}; "
                    f"declare it with ignore()"
                )

        _check_operator(qualified, kind, metadata)
        return FieldSpec(
            name=f.name,
            kind=kind,
            python_type=python_type,
            metadata=metadata,
            zero=False if kind is FieldKind.INCLUDE else _zero_value(python_type, optional),
        )

    def schema_for(self, criteria_type: type) -> CriteriaSchema:
        """Return the schema of a registered criteria class.

        Raises:
            ConfigurationError: The class was never registered.
        """
        schema = self._schemas.get(criteria_type)
        if schema is None:
            raise ConfigurationError(
                f"{getattr(criteria_type, '__name__', criteria_type)!r} is not a registered "
                f"criteria class; decorate it with @criteria"
            )
        return schema

    def is_registered(self, criteria_type: type) -> bool:
        return criteria_type in self._schemas

    def clear(self) -> None:
        """Remove all registered schemas.

        Primarily useful in tests that register criteria on a private
        registry. Classes must be decorated again before they compile.

        Example::

            registry = CriteriaRegistry()
            criteria(registry=registry)(MemberSearch)
            registry.clear()
            assert not registry.is_registered(MemberSearch)
        """
        self._schemas.clear()


# Module-level default registry (singleton).
_default_registry = CriteriaRegistry()


def get_default_criteria_registry() -> CriteriaRegistry:
    """Return the global default criteria registry used by ``@criteria``."""
    return _default_registry


@overload
def criteria(cls: C, /) -> C: ...


@overload
def criteria(*, registry: CriteriaRegistry | None = None) -> Callable[[C], C]: ...


def criteria(cls: Any = None, /, *, registry: CriteriaRegistry | None = None) -> Any:
    """Class decorator that declares a criteria class.

    Turns the class into a keyword-only dataclass (unless it already is
    one) and registers its field metadata.

    Example::

        @criteria
        class MemberSearch(SearchCriteria):
            name: str | None = None
            email: str | None = compare(CompareOperator.EQUALS)
            include_posts: bool = include()
    """

    def decorator(target: C) -> C:
        if "__dataclass_fields__" not in target.__dict__:
            target = dataclasses.dataclass(kw_only=True)(target)
        (registry if registry is not None else get_default_criteria_registry()).register(target)
        return target

    if cls is None:
        return decorator
    return decorator(cls)


def resolve_field_metadata(
    criteria_type: type,
    name: str,
    *,
    registry: CriteriaRegistry | None = None,
) -> FieldMetadata:
    """Return the ``FieldMetadata`` of one field of a registered criteria class.

    Example::

        meta = resolve_field_metadata(MemberSearch, "email")
        assert meta.operator is CompareOperator.EQUALS
    """
    target = registry if registry is not None else get_default_criteria_registry()
    return target.schema_for(criteria_type).field(name).metadata
