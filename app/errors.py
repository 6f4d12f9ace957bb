"""Error types and global exception handlers for the Contacts API.

Every error response has the shape ``{"errors": ...}``:

* ``HTTPException`` and its subclasses below map to their status code
  with the exception detail as the body;
* request validation failures map to ``400`` with a list of
  ``{"field", "message"}`` entries;
* anything else maps to ``500`` without leaking internal details.
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class BadRequestError(HTTPException):
    """Request is well formed but violates a business rule."""

    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class UnauthorizedError(HTTPException):
    """Request carries no valid session token."""

    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class NotFoundError(HTTPException):
    """Record is missing or not owned by the requesting user."""

    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code >= 500:
            logger.error("HTTP %s on %s: %s", exc.status_code, request.url.path, exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"errors": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = validation_messages(exc)
        logger.warning("Validation error on %s: %s", request.url.path, errors)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"errors": errors},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"errors": "Internal server error"},
        )


def validation_messages(exc: RequestValidationError) -> list[dict]:
    """Flatten pydantic errors into ``{"field", "message"}`` entries."""
    messages = []
    for error in exc.errors():
        # drop the "body"/"query"/"path" prefix FastAPI puts in front
        location = [str(part) for part in error["loc"][1:]] or [str(error["loc"][0])]
        messages.append({"field": ".".join(location), "message": error["msg"]})
    return messages
