"""
Domain errors and their HTTP rendering.

Services raise subclasses of ``DomainError`` with a message key from
``core.i18n``; ``register_error_handlers`` installs a FastAPI handler
that turns them into ``{"detail": ..., "code": ...}`` responses in the
language the client asked for.  Because ``DomainError`` derives from
``ValueError``, callers that only care about "the operation was
rejected" can still catch ``ValueError``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .i18n import negotiate_language, translate


logger = logging.getLogger(__name__)


class DomainError(ValueError):
    """Base error for rejected operations."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, key: str, **params) -> None:
        self.key = key
        self.params = params
        super().__init__(translate(key, "en", **params))


class InvalidInputError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDeniedError(DomainError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(DomainError):
    status_code = status.HTTP_409_CONFLICT


def register_error_handlers(app: FastAPI) -> None:
    """Register handlers for domain, validation and unexpected errors."""

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        lang = negotiate_language(request.headers.get("accept-language"))
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.key)
        headers = None
        if isinstance(exc, AuthenticationError):
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": translate(exc.key, lang, **exc.params), "code": exc.key},
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        lang = negotiate_language(request.headers.get("accept-language"))
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": translate("invalid_input", lang),
                "code": "invalid_input",
                "errors": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        lang = negotiate_language(request.headers.get("accept-language"))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": translate("unexpected_error", lang), "code": "unexpected_error"},
        )
