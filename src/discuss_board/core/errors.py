"""Domain errors raised by services and their HTTP mapping."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class DiscussBoardError(Exception):
    """Base class for request-aborting business errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class InvalidRequestError(DiscussBoardError):
    """The request violates a business rule."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(DiscussBoardError):
    """Credentials or tokens could not be validated."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(DiscussBoardError):
    """The caller is authenticated but not allowed to act."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(DiscussBoardError):
    """A referenced row does not exist or is soft-deleted."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(DiscussBoardError):
    """The write would duplicate an existing row."""

    status_code = status.HTTP_409_CONFLICT


def register_exception_handlers(app: FastAPI) -> None:
    """Install JSON handlers that map domain errors to HTTP responses."""

    @app.exception_handler(DiscussBoardError)
    async def handle_domain_error(request: Request, exc: DiscussBoardError) -> JSONResponse:
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
        headers = None
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=headers,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Unexpected server error"},
        )
