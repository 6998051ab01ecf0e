"""Logging middleware for request/response tracking."""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs every HTTP request with a request id and its duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or f"req-{uuid.uuid4().hex[:12]}"

        logger.info(
            f"Request started - {request.method} {request.url.path} "
            f"[{request_id}]"
        )

        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.error(
                f"Request failed - {request.method} {request.url.path} "
                f"[{request_id}] - Error: {e} - Duration: {duration:.3f}s"
            )
            raise

        duration = time.perf_counter() - start_time
        logger.info(
            f"Request completed - {request.method} {request.url.path} "
            f"[{request_id}] - Status: {response.status_code} - "
            f"Duration: {duration:.3f}s"
        )

        response.headers["X-Request-ID"] = request_id
        return response
