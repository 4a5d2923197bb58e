"""Request middleware for token-vault.

Provides request logging and metrics middleware.
"""

import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from token_vault.logging.setup import get_logger, set_request_id
from token_vault.metrics.collectors import (
    ACTIVE_REQUESTS,
    REQUEST_COUNT,
    REQUEST_LATENCY,
)

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging and metrics.

    Adds request_id to all requests and logs request start/completion.
    Also records Prometheus metrics for request latency and count.
    Request bodies are never logged.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        request_id = str(uuid.uuid4())[:8]
        set_request_id(request_id)
        request.state.request_id = request_id

        endpoint = request.url.path
        method = request.method

        ACTIVE_REQUESTS.inc()

        start_time = time.time()
        logger.info(
            "Request started",
            extra={
                "event": "request_started",
                "method": method,
                "path": endpoint,
            },
        )

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            logger.exception(
                "Request failed with exception",
                extra={
                    "event": "request_error",
                    "error_type": type(e).__name__,
                },
            )
            raise
        finally:
            duration = time.time() - start_time

            ACTIVE_REQUESTS.dec()

            status_str = str(status_code)
            REQUEST_LATENCY.labels(
                method=method,
                endpoint=endpoint,
                status=status_str,
            ).observe(duration)
            REQUEST_COUNT.labels(
                method=method,
                endpoint=endpoint,
                status=status_str,
            ).inc()

            logger.info(
                "Request completed",
                extra={
                    "event": "request_completed",
                    "method": method,
                    "path": endpoint,
                    "status_code": status_code,
                    "duration_ms": round(duration * 1000, 2),
                },
            )

        response.headers["X-Request-ID"] = request_id
        return response
