"""FastAPI integration for sqla-criteria."""

from __future__ import annotations

try:
    import fastapi as _fastapi_check  # noqa: F401  # pyright: ignore[reportUnusedImport]

    del _fastapi_check
except ImportError as exc:
    raise ImportError(
        "FastAPI integration requires fastapi. Install it with: pip install sqla-criteria[fastapi]"
    ) from exc

from sqla_criteria.integrations.fastapi._errors import install_error_handlers

__all__ = ["install_error_handlers"]
