"""sqla-criteria: declarative search criteria and record policies for SQLAlchemy 2.0.

Criteria are plain dataclasses whose fields describe filters, eager loads
and paging. They compile to SQLAlchemy ``Select`` statements. Loaded
results are then checked entity by entity against per-type record
policies before they are returned.

Example::

    from sqla_criteria import compare, criteria, include, search, SearchCriteria

    @criteria
    class MemberSearch(SearchCriteria):
        name: str = compare()
        include_posts: bool = include()

    result = search(session, Member, MemberSearch(name="ann"), actor=current_user)
"""

from importlib.metadata import PackageNotFoundError, version

from sqla_criteria._checks import authorize, can
from sqla_criteria._types import ActorLike
from sqla_criteria.compiler._compile import compile_criteria
from sqla_criteria.compiler._plan import CompiledCriteria, FilterPredicate
from sqla_criteria.compiler._predicate import build_predicate
from sqla_criteria.compiler._query import apply_criteria
from sqla_criteria.config._config import CriteriaConfig, configure
from sqla_criteria.criteria._base import (
    OrderField,
    Pagination,
    SearchCriteria,
    SortDirection,
)
from sqla_criteria.criteria._fields import CompareOperator, compare, ignore, include
from sqla_criteria.criteria._registry import CriteriaRegistry, criteria
from sqla_criteria.exceptions import (
    AuthorizationDenied,
    ConfigurationError,
    CriteriaError,
    NoPolicyError,
    OperatorMismatchError,
    UnknownFieldError,
)
from sqla_criteria.explain import explain_access, explain_criteria
from sqla_criteria.policy._base import AuthorizationPolicy, Capability
from sqla_criteria.policy._decorator import policy
from sqla_criteria.policy._registry import PolicyRegistry
from sqla_criteria.session import async_get_by_id, async_search, get_by_id, search

try:
    __version__ = version("sqla-criteria")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "__version__",
    "ActorLike",
    "AuthorizationDenied",
    "AuthorizationPolicy",
    "Capability",
    "CompareOperator",
    "CompiledCriteria",
    "ConfigurationError",
    "CriteriaConfig",
    "CriteriaError",
    "CriteriaRegistry",
    "FilterPredicate",
    "NoPolicyError",
    "OperatorMismatchError",
    "OrderField",
    "Pagination",
    "PolicyRegistry",
    "SearchCriteria",
    "SortDirection",
    "UnknownFieldError",
    "apply_criteria",
    "async_get_by_id",
    "async_search",
    "authorize",
    "build_predicate",
    "can",
    "compare",
    "compile_criteria",
    "configure",
    "criteria",
    "explain_access",
    "explain_criteria",
    "get_by_id",
    "ignore",
    "include",
    "policy",
    "search",
]
