"""Layered configuration for sqla-criteria."""

from __future__ import annotations

from dataclasses import dataclass

from sqla_criteria._types import CycleStrategy, IncludeStrategy, OnMissingPolicy

__all__ = [
    "CriteriaConfig",
    "configure",
    "get_global_config",
    "_reset_global_config",
    "_set_global_config",
]

_VALID_MISSING_POLICY: set[str] = {"allow", "deny", "raise"}
_VALID_CYCLE_STRATEGIES: set[str] = {"grandparent", "path"}
_VALID_INCLUDE_STRATEGIES: set[str] = {"selectin", "joined"}

# Sentinel so ``soft_delete_column=None`` can be passed through merge().
_UNSET: object = object()


@dataclass(frozen=True, slots=True)
class CriteriaConfig:
    """Layered configuration with merge semantics (global -> call).

    Attributes:
        on_missing_policy: Behavior when no policy is registered for an
            ``(entity type, actor type)`` pair.
            ``"allow"`` grants the node and keeps walking the graph.
            ``"deny"`` fails the whole check.
            ``"raise"`` raises ``NoPolicyError``.
        cycle_strategy: How the graph walker avoids cycles.
            ``"grandparent"`` skips a child equal to the node two hops back.
            ``"path"`` skips any child already on the current path.
        include_strategy: Loader used for include paths
            (``selectinload`` or ``joinedload``).
        soft_delete_column: Column excluded-when-true unless the criteria
            filters on it explicitly. ``None`` disables the filter.
        log_policy_decisions: Log each policy decision via ``sqla_criteria``.
        log_compiled_criteria: Log each compiled criteria plan at DEBUG.

    Example::

        config = CriteriaConfig(on_missing_policy="deny")
        merged = config.merge(cycle_strategy="path")
    """

    on_missing_policy: OnMissingPolicy = "allow"
    cycle_strategy: CycleStrategy = "grandparent"
    include_strategy: IncludeStrategy = "selectin"
    soft_delete_column: str | None = "is_deleted"
    log_policy_decisions: bool = False
    log_compiled_criteria: bool = False

    def __post_init__(self) -> None:
        if self.on_missing_policy not in _VALID_MISSING_POLICY:
            raise ValueError(
                f"on_missing_policy must be one of {_VALID_MISSING_POLICY!r}, "
                f"got {self.on_missing_policy!r}"
            )
        if self.cycle_strategy not in _VALID_CYCLE_STRATEGIES:
            raise ValueError(
                f"cycle_strategy must be one of {_VALID_CYCLE_STRATEGIES!r}, "
                f"got {self.cycle_strategy!r}"
            )
        if self.include_strategy not in _VALID_INCLUDE_STRATEGIES:
            raise ValueError(
                f"include_strategy must be one of {_VALID_INCLUDE_STRATEGIES!r}, "
                f"got {self.include_strategy!r}"
            )

    def merge(
        self,
        *,
        on_missing_policy: OnMissingPolicy | None = None,
        cycle_strategy: CycleStrategy | None = None,
        include_strategy: IncludeStrategy | None = None,
        soft_delete_column: str | None | object = _UNSET,
        log_policy_decisions: bool | None = None,
        log_compiled_criteria: bool | None = None,
    ) -> CriteriaConfig:
        """Return a new config with overrides applied.

        ``None`` means "keep the current value" for every setting except
        ``soft_delete_column``, where ``None`` disables the filter and
        omitting the argument keeps the current value.

        Returns:
            A new ``CriteriaConfig`` with overrides merged.

        Example::

            base = CriteriaConfig()
            strict = base.merge(on_missing_policy="deny")
        """
        return CriteriaConfig(
            on_missing_policy=(
                on_missing_policy if on_missing_policy is not None else self.on_missing_policy
            ),
            cycle_strategy=(cycle_strategy if cycle_strategy is not None else self.cycle_strategy),
            include_strategy=(
                include_strategy if include_strategy is not None else self.include_strategy
            ),
            soft_delete_column=(
                self.soft_delete_column
                if soft_delete_column is _UNSET
                else soft_delete_column  # type: ignore[arg-type]
            ),
            log_policy_decisions=(
                log_policy_decisions
                if log_policy_decisions is not None
                else self.log_policy_decisions
            ),
            log_compiled_criteria=(
                log_compiled_criteria
                if log_compiled_criteria is not None
                else self.log_compiled_criteria
            ),
        )


# ---------------------------------------------------------------------------
# Global configuration singleton
# ---------------------------------------------------------------------------

_global_config = CriteriaConfig()


def get_global_config() -> CriteriaConfig:
    """Return the current global configuration.

    Example::

        config = get_global_config()
        print(config.on_missing_policy)  # "allow"
    """
    return _global_config


def configure(
    *,
    on_missing_policy: OnMissingPolicy | None = None,
    cycle_strategy: CycleStrategy | None = None,
    include_strategy: IncludeStrategy | None = None,
    soft_delete_column: str | None | object = _UNSET,
    log_policy_decisions: bool | None = None,
    log_compiled_criteria: bool | None = None,
) -> CriteriaConfig:
    """Update the global configuration by merging overrides.

    Args:
        on_missing_policy: Set to ``"allow"``, ``"deny"`` or ``"raise"``.
        cycle_strategy: Set to ``"grandparent"`` or ``"path"``.
        include_strategy: Set to ``"selectin"`` or ``"joined"``.
        soft_delete_column: Column name of the soft-delete flag, or ``None``.
        log_policy_decisions: Enable/disable audit logging of policy decisions.
        log_compiled_criteria: Enable/disable DEBUG logging of compiled plans.

    Returns:
        The updated global ``CriteriaConfig``.

    Example::

        configure(on_missing_policy="deny")
        # Entities without a policy now fail the graph check
    """
    global _global_config
    _global_config = _global_config.merge(
        on_missing_policy=on_missing_policy,
        cycle_strategy=cycle_strategy,
        include_strategy=include_strategy,
        soft_delete_column=soft_delete_column,
        log_policy_decisions=log_policy_decisions,
        log_compiled_criteria=log_compiled_criteria,
    )
    return _global_config


def _set_global_config(cfg: CriteriaConfig) -> None:
    """Replace global config with an exact snapshot. For testing only."""
    global _global_config
    _global_config = cfg


def _reset_global_config() -> None:
    """Reset global config to defaults. For testing only."""
    global _global_config
    _global_config = CriteriaConfig()
