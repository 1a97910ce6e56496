"""Exception hierarchy for sqla-criteria."""

from __future__ import annotations

__all__ = [
    "AuthorizationDenied",
    "ConfigurationError",
    "CriteriaError",
    "NoPolicyError",
    "OperatorMismatchError",
    "UnknownFieldError",
]


class CriteriaError(Exception):
    """Base exception for all sqla-criteria errors."""


class ConfigurationError(CriteriaError):
    """Developer-facing misconfiguration.

    Raised at registration or compile time for malformed criteria
    metadata, malformed policy registry keys, and paths that do not
    exist on the target model. Never raised for an access decision.
    """


class OperatorMismatchError(ConfigurationError):
    """A comparison operator does not fit the field's value kind.

    Attributes:
        field: The criteria field (or dotted path) carrying the operator.
        operator: The rejected operator.
        kind: The value kind of the field (``"text"`` or ``"scalar"``).

    Example::

        @criteria
        class BadSearch(SearchCriteria):
            name: str | None = compare(CompareOperator.GREATER_THAN)
        # OperatorMismatchError: 'greater_than' cannot be applied to text field 'name'
    """

    def __init__(self, *, field: str, operator: object, kind: str) -> None:
        self.field = field
        self.operator = operator
        self.kind = kind
        op_name = getattr(operator, "value", operator)
        super().__init__(f"{op_name!r} cannot be applied to {kind} field {field!r}")


class UnknownFieldError(ConfigurationError):
    """A criteria path, include path or order field is missing on the model.

    Attributes:
        model: Name of the model the path was resolved against.
        path: The dotted path that failed to resolve.
    """

    def __init__(self, *, model: str, path: str) -> None:
        self.model = model
        self.path = path
        super().__init__(f"{model} has no attribute path {path!r}")


class AuthorizationDenied(CriteriaError):  # noqa: N818
    """A node of the entity graph failed its capability check.

    Attributes:
        actor: The actor that was denied.
        capability: The capability that was checked.
        resource_type: Name of the entity type that denied access.
        resource_id: Identity of the denying entity, when known.

    Example::

        try:
            authorize(user, Capability.GET, order)
        except AuthorizationDenied as exc:
            print(f"{exc.actor} cannot {exc.capability} {exc.resource_type}")
    """

    def __init__(
        self,
        *,
        actor: object,
        capability: str,
        resource_type: str,
        resource_id: object = None,
        message: str | None = None,
    ) -> None:
        self.actor = actor
        self.capability = capability
        self.resource_type = resource_type
        self.resource_id = resource_id
        if message is None:
            message = f"Actor {actor!r} is not authorized to {capability} {resource_type}"
            if resource_id is not None:
                message += f" (id={resource_id!r})"
        super().__init__(message)


class NoPolicyError(CriteriaError):
    """No policy registered for (entity_type, actor_type).

    Raised only when configured with ``on_missing_policy="raise"``;
    the default is to allow entities without a registered policy.

    Attributes:
        resource_type: The entity type with no policy.
        actor_type: The actor type with no policy.

    Example::

        configure(on_missing_policy="raise")
        # Now unregistered pairs raise instead of silently allowing
    """

    def __init__(self, *, resource_type: str, actor_type: str) -> None:
        self.resource_type = resource_type
        self.actor_type = actor_type
        super().__init__(f"No policy registered for ({resource_type}, {actor_type})")
