"""Exception handlers for FastAPI integration."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from sqla_criteria.exceptions import (
    AuthorizationDenied,
    ConfigurationError,
    NoPolicyError,
    UnknownFieldError,
)

__all__ = ["install_error_handlers"]


def _error_response(status_code: int, exc: Exception, **extra: object) -> JSONResponse:
    content = jsonable_encoder({"detail": str(exc), **extra})
    return JSONResponse(status_code=status_code, content=content)


def install_error_handlers(app: FastAPI) -> None:
    """Install exception handlers for sqla-criteria errors on a FastAPI app.

    Converts library exceptions into HTTP responses:

    - ``AuthorizationDenied`` -> 403 Forbidden, with the denied capability
      and resource in the body
    - ``UnknownFieldError`` -> 400 Bad Request (typically a sort field taken
      from the request)
    - ``NoPolicyError`` and ``ConfigurationError`` -> 500 Internal Server Error

    Args:
        app: The FastAPI application instance.

    Example::

        from fastapi import FastAPI
        from sqla_criteria.integrations.fastapi import install_error_handlers

        app = FastAPI()
        install_error_handlers(app)
    """

    @app.exception_handler(AuthorizationDenied)
    async def authorization_denied_handler(  # pyright: ignore[reportUnusedFunction]
        request: Request, exc: AuthorizationDenied
    ) -> JSONResponse:
        return _error_response(
            403,
            exc,
            capability=exc.capability,
            resource_type=exc.resource_type,
            resource_id=exc.resource_id,
        )

    @app.exception_handler(UnknownFieldError)
    async def unknown_field_handler(  # pyright: ignore[reportUnusedFunction]
        request: Request, exc: UnknownFieldError
    ) -> JSONResponse:
        return _error_response(400, exc, field=exc.path)

    @app.exception_handler(NoPolicyError)
    async def no_policy_handler(  # pyright: ignore[reportUnusedFunction]
        request: Request, exc: NoPolicyError
    ) -> JSONResponse:
        return _error_response(500, exc)

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(  # pyright: ignore[reportUnusedFunction]
        request: Request, exc: ConfigurationError
    ) -> JSONResponse:
        return _error_response(500, exc)
