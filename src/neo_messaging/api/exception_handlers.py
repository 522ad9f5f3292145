"""
Exception handlers for the messaging API.

Every error leaves the service in the same envelope:
``{"success": false, "message", "errors", "data", "metadata"}``.
"""
from typing import Dict, Any, Optional, Callable
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

from ..core.exceptions import NeoMessagingError, get_http_status_code
from ..models.base import error_response

logger = logging.getLogger(__name__)

ResponseFormatter = Callable[..., Dict[str, Any]]


class ExceptionHandlerRegistry:
    """Registers the service's exception handlers on an application."""

    def __init__(
        self,
        response_formatter: Optional[ResponseFormatter] = None,
        is_production: bool = True
    ):
        """
        Initialize exception handler registry.

        Args:
            response_formatter: Function to format error responses
            is_production: Whether to hide unexpected error details
        """
        self.response_formatter = response_formatter or error_response
        self.is_production = is_production

    def register_handlers(self, app: FastAPI) -> None:
        """Register exception handlers for the application."""

        @app.exception_handler(NeoMessagingError)
        async def messaging_error_handler(request: Request, exc: NeoMessagingError):
            """Handle service exceptions."""
            status_code = get_http_status_code(exc)
            error = exc.to_dict()
            if status_code >= 500:
                logger.error(
                    f"{exc.__class__.__name__} on {request.url.path}: {exc.message} {exc.details}",
                    exc_info=exc
                )
                # Server-side errors expose only their code and message
                error = {"code": exc.error_code, "message": exc.message}
            return JSONResponse(
                status_code=status_code,
                content=self.response_formatter(
                    message=exc.message,
                    errors=[error]
                )
            )

        @app.exception_handler(RequestValidationError)
        async def request_validation_handler(request: Request, exc: RequestValidationError):
            """Handle malformed requests."""
            errors = [
                {
                    "code": "ValidationError",
                    "message": error.get("msg"),
                    "details": {"location": [str(part) for part in error.get("loc", ())]},
                }
                for error in exc.errors()
            ]
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content=self.response_formatter(message="Invalid request", errors=errors)
            )

        @app.exception_handler(HTTPException)
        async def http_exception_handler(request: Request, exc: HTTPException):
            """Wrap HTTP errors in the standard envelope."""
            return JSONResponse(
                status_code=exc.status_code,
                content=self.response_formatter(message=str(exc.detail)),
                headers=getattr(exc, "headers", None)
            )

        @app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            """Handle unexpected exceptions."""
            logger.error(f"Unhandled exception: {exc}", exc_info=True)

            if self.is_production:
                message = "An unexpected error occurred"
            else:
                message = str(exc)

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=self.response_formatter(message=message)
            )


def register_exception_handlers(
    app: FastAPI,
    response_formatter: Optional[ResponseFormatter] = None,
    is_production: bool = True
) -> None:
    """Create an ExceptionHandlerRegistry and register its handlers in one call."""
    registry = ExceptionHandlerRegistry(response_formatter, is_production)
    registry.register_handlers(app)
