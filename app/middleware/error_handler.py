"""
Global error handling middleware.
"""
import logging
from typing import Callable
from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ..exceptions.auth_exceptions import AuthException
from ..models.responses import ErrorResponse

logger = logging.getLogger(__name__)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Middleware to handle exceptions globally."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            response = await call_next(request)
            return response
        except AuthException as exc:
            logger.warning(
                f"Auth exception: {exc.message}",
                extra={
                    "status_code": exc.status_code,
                    "details": exc.details,
                    "path": request.url.path,
                    "method": request.method
                }
            )
            return JSONResponse(
                status_code=exc.status_code,
                content=ErrorResponse(error=exc.message, details=exc.details).model_dump()
            )
        except Exception as exc:
            logger.error(
                f"Unexpected error: {str(exc)}",
                extra={
                    "path": request.url.path,
                    "method": request.method
                },
                exc_info=True
            )
            return JSONResponse(
                status_code=500,
                content=ErrorResponse(error="Internal server error", details={}).model_dump()
            )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as a plain client error."""
    logger.warning(
        "Rejected malformed request",
        extra={"path": request.url.path, "method": request.method}
    )
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error="Invalid request body", details={}).model_dump()
    )
