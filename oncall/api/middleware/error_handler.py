"""Error handling middleware."""

import logging
from typing import Callable

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from pydantic import ValidationError

from ...exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Last-resort handler that turns escaped exceptions into JSON errors."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable
    ) -> JSONResponse:
        """Process request and handle errors.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler

        Returns:
            HTTP response or error response
        """
        try:
            return await call_next(request)

        except ConfigurationError as e:
            logger.error(f"Configuration error on {request.url.path}: {e}")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error": str(e),
                    "message": "Server is missing required configuration"
                }
            )

        except ValidationError as e:
            logger.warning(f"Validation error: {e}")
            return JSONResponse(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                content={
                    "error": "Validation Error",
                    "detail": e.errors(include_context=False),
                    "message": "Invalid request data"
                }
            )

        except Exception as e:
            logger.error(f"Unhandled exception: {e}", exc_info=True)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error": "Internal Server Error",
                    "message": "An unexpected error occurred"
                }
            )
