"""Domain error taxonomy and the handlers that render it as JSON."""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class HouseDirectError(Exception):
    """Base exception for domain errors raised by the service layer."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message, **self.extra}


class NotFoundError(HouseDirectError):
    """Referenced row does not exist (or is not visible to the caller)."""

    status_code = status.HTTP_404_NOT_FOUND


class UnauthorizedError(HouseDirectError):
    """Missing or invalid session."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(HouseDirectError):
    """Session is valid but lacks the required role or ownership."""

    status_code = status.HTTP_403_FORBIDDEN


class ValidationFailedError(HouseDirectError):
    """Input rejected by a rule the request schema cannot express."""

    status_code = status.HTTP_400_BAD_REQUEST


class DuplicateReportError(ValidationFailedError):
    """Reporter already filed a report against the same entity."""


class InvalidTransitionError(HouseDirectError):
    """Requested status change is not allowed from the current status."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, kind: str, current: str, requested: str):
        super().__init__(
            f"Cannot change {kind} status from '{current}' to '{requested}'",
            current_status=current,
            requested_status=requested,
        )


class EntityMissingError(HouseDirectError):
    """Agent or property referenced by a verification request no longer exists."""

    status_code = status.HTTP_409_CONFLICT


class DownstreamFailureError(HouseDirectError):
    """Database or SMTP call was rejected by the external collaborator."""

    status_code = status.HTTP_502_BAD_GATEWAY


def _validation_details(exc: RequestValidationError) -> list[dict[str, str]]:
    details = []
    for error in exc.errors():
        # Drop the leading "body"/"query" segment so paths read like field names.
        loc = [str(part) for part in error.get("loc", ())[1:]]
        details.append({"path": ".".join(loc), "message": error.get("msg", "")})
    return details


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as ``{"error": str, ...}``."""

    @app.exception_handler(HouseDirectError)
    async def handle_domain_error(request: Request, exc: HouseDirectError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"[API] {request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(DBAPIError)
    async def handle_database_error(request: Request, exc: DBAPIError) -> JSONResponse:
        logger.error(f"[API] {request.method} {request.url.path} database error: {error_message(exc)}")
        return await handle_domain_error(request, DownstreamFailureError("Database request failed"))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Validation Error",
                "message": "Invalid input data",
                "details": _validation_details(exc),
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"[API] Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


def error_message(exc: Optional[BaseException]) -> Optional[str]:
    """Short, single-line description of an exception for logs and job rows."""
    if exc is None:
        return None
    text = str(exc) or exc.__class__.__name__
    return text.splitlines()[0][:500]
