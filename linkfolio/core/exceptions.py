"""Typed failures raised by the link store and mapped to HTTP responses."""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

logger = structlog.get_logger()


class LinkfolioError(Exception):
    """Base class for all failures surfaced to callers."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"
    detail: str = "Request failed"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


class ValidationError(LinkfolioError):
    """Malformed title/url, or a reorder set that does not match the collection."""

    status_code = status.HTTP_422_UNPROCESSABLE_CONTENT
    code = "validation_error"
    detail = "Invalid input"

    def __init__(self, detail: str | None = None, field: str | None = None) -> None:
        super().__init__(detail)
        self.field = field


class NotFoundError(LinkfolioError):
    """Link not owned by the caller, or username not found."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    detail = "Not found"


class AuthError(LinkfolioError):
    """No authenticated identity."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "not_authenticated"
    detail = "Not authenticated"


class ConflictError(LinkfolioError):
    """A row changed since the caller read it."""

    status_code = status.HTTP_409_CONFLICT
    code = "conflict"
    detail = "Links were modified concurrently; reload and try again"


class StoreError(LinkfolioError):
    """Opaque storage failure."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "store_error"
    detail = "Storage unavailable"


async def linkfolio_error_handler(request: Request, exc: LinkfolioError) -> JSONResponse:
    """Render a LinkfolioError as a JSON body with its status code."""
    content: dict[str, str] = {"detail": exc.detail, "code": exc.code}
    if isinstance(exc, ValidationError) and exc.field:
        content["field"] = exc.field
    headers = None
    if isinstance(exc, AuthError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Render database failures raised outside the link store, e.g. at commit."""
    error: LinkfolioError = ConflictError() if isinstance(exc, StaleDataError) else StoreError()
    logger.warning(
        "Database failure while handling request",
        error=str(exc),
        code=error.code,
    )
    return await linkfolio_error_handler(request, error)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error handlers to the application."""
    app.add_exception_handler(LinkfolioError, linkfolio_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
