"""
Global exception handlers.

Every failure answers with a JSON body carrying an `error` field. Budget
query failures are logged in full and answered with a short message only.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from budget_api.errors import DelegateError, InvalidParameterError

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal Server Error"


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(InvalidParameterError)
    async def invalid_parameter_handler(request: Request, exc: InvalidParameterError):
        logger.warning(
            f"Rejected {request.method} {request.url.path}: {exc.message}",
            extra={"path": request.url.path, "query": str(request.query_params) or None},
        )
        return JSONResponse(status_code=exc.http_status, content={"error": exc.message})

    @app.exception_handler(DelegateError)
    async def delegate_error_handler(request: Request, exc: DelegateError):
        logger.error(
            f"Error processing request {request.method} {request.url.path}: {exc.message}",
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": INTERNAL_ERROR, "message": exc.message},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
        fields = ", ".join(
            ".".join(str(loc) for loc in e["loc"][1:]) or str(e["loc"][0])
            for e in exc.errors()
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": f"Invalid request parameters: {fields}"},
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all, never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": INTERNAL_ERROR, "message": "An unexpected error occurred."},
        )
