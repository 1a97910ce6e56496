"""Explain/dry-run mode: structured insight into compiled criteria and graph checks."""

from sqla_criteria.explain._access import explain_access
from sqla_criteria.explain._criteria import explain_criteria
from sqla_criteria.explain._models import AccessExplanation, CriteriaExplanation

__all__ = [
    "AccessExplanation",
    "CriteriaExplanation",
    "explain_access",
    "explain_criteria",
]
