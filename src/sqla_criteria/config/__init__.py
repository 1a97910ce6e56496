"""Configuration module for sqla-criteria."""

from __future__ import annotations

from sqla_criteria.config._config import CriteriaConfig, configure, get_global_config

__all__ = ["CriteriaConfig", "configure", "get_global_config"]
