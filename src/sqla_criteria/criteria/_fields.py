"""Field metadata for criteria classes: operators, flags and field specs."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any

__all__ = [
    "METADATA_KEY",
    "SCALAR_OPERATORS",
    "TEXT_OPERATORS",
    "CompareOperator",
    "FieldKind",
    "FieldMetadata",
    "FieldSpec",
    "compare",
    "ignore",
    "include",
    "include_name",
]

# Key under which FieldMetadata is stored in ``dataclasses.field(metadata=...)``.
METADATA_KEY = "sqla_criteria"


class CompareOperator(str, Enum):
    """Comparison applied between a model attribute and a criteria value."""

    EQUALS = "equals"
    GREATER_THAN = "greater_than"
    GREATER_OR_EQUAL = "greater_or_equal"
    LESS_THAN = "less_than"
    LESS_OR_EQUAL = "less_or_equal"
    STARTS_WITH = "starts_with"
    CONTAINS = "contains"
    ENDS_WITH = "ends_with"


class FieldKind(str, Enum):
    """How the compiler treats a criteria field."""

    TEXT = "text"
    SCALAR = "scalar"
    NESTED = "nested"
    INCLUDE = "include"
    OPAQUE = "opaque"


TEXT_OPERATORS: frozenset[CompareOperator] = frozenset(
    {
        CompareOperator.EQUALS,
        CompareOperator.STARTS_WITH,
        CompareOperator.CONTAINS,
        CompareOperator.ENDS_WITH,
    }
)

SCALAR_OPERATORS: frozenset[CompareOperator] = frozenset(
    {
        CompareOperator.EQUALS,
        CompareOperator.GREATER_THAN,
        CompareOperator.GREATER_OR_EQUAL,
        CompareOperator.LESS_THAN,
        CompareOperator.LESS_OR_EQUAL,
    }
)


@dataclass(frozen=True, slots=True)
class FieldMetadata:
    """Static comparison and inclusion settings of one criteria field.

    Attributes:
        operator: Comparison operator. ``None`` means the kind default:
            ``STARTS_WITH`` for text, ``EQUALS`` for ordered scalars.
        case_sensitive: Compare text without lower-casing both sides.
        always_compare: Emit a predicate even for zero values and even
            when the field is ignored.
        ignore: Never compare this field unless ``always_compare`` is set.
        include: The field is a boolean flag requesting eager loading.
        include_as: Relationship name to load. ``None`` derives it from
            the field name.
        attribute: Model attribute the field targets. ``None`` uses the
            field name.
    """

    operator: CompareOperator | None = None
    case_sensitive: bool = False
    always_compare: bool = False
    ignore: bool = False
    include: bool = False
    include_as: str | None = None
    attribute: str | None = None

    def effective_operator(self, kind: FieldKind) -> CompareOperator:
        """Return the configured operator or the default for *kind*."""
        if self.operator is not None:
            return self.operator
        if kind is FieldKind.TEXT:
            return CompareOperator.STARTS_WITH
        return CompareOperator.EQUALS


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """A criteria field resolved once at registration time.

    Attributes:
        name: The dataclass field name.
        kind: Text, scalar, nested criteria, include flag or opaque.
        python_type: The declared type with ``Optional`` unwrapped.
        metadata: The field's ``FieldMetadata`` (all defaults if unannotated).
        zero: The type's zero value; ``None`` for optional fields.
    """

    name: str
    kind: FieldKind
    python_type: Any
    metadata: FieldMetadata
    zero: Any = None

    @property
    def operator(self) -> CompareOperator:
        return self.metadata.effective_operator(self.kind)

    @property
    def segment(self) -> str:
        """Path segment this field contributes to a dotted attribute path."""
        return self.metadata.attribute or self.name

    def is_zero(self, value: Any) -> bool:
        if value is None:
            return True
        if self.zero is None:
            return False
        return type(value) is type(self.zero) and value == self.zero


def compare(
    operator: CompareOperator | None = None,
    *,
    case_sensitive: bool = False,
    always: bool = False,
    ignore: bool = False,
    attribute: str | None = None,
    default: Any = None,
) -> Any:
    """Declare a compared criteria field.

    Example::

        @criteria
        class MemberSearch(SearchCriteria):
            email: str | None = compare(CompareOperator.EQUALS)
            min_age: int | None = compare(
                CompareOperator.GREATER_OR_EQUAL, attribute="age"
            )
    """
    metadata = FieldMetadata(
        operator=operator,
        case_sensitive=case_sensitive,
        always_compare=always,
        ignore=ignore,
        attribute=attribute,
    )
    return dataclasses.field(default=default, metadata={METADATA_KEY: metadata})


def ignore(default: Any = None) -> Any:
    """Declare a field the compiler never turns into a predicate."""
    return dataclasses.field(default=default, metadata={METADATA_KEY: FieldMetadata(ignore=True)})


def include(name: str | None = None) -> Any:
    """Declare a boolean flag that eager-loads a relationship when ``True``.

    Without *name*, the relationship is the field name with an
    ``include_`` prefix or ``_include`` suffix removed.

    Example::

        include_posts: bool = include()              # loads "posts"
        with_org: bool = include("organization")     # loads "organization"
    """
    metadata = FieldMetadata(include=True, include_as=name)
    return dataclasses.field(default=False, metadata={METADATA_KEY: metadata})


def include_name(spec: FieldSpec) -> str:
    """Return the relationship name an include flag refers to."""
    if spec.metadata.include_as:
        return spec.metadata.include_as
    name = spec.name
    if name.startswith("include_"):
        name = name[len("include_") :]
    elif name.endswith("_include"):
        name = name[: -len("_include")]
    return name
