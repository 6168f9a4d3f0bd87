"""
Logging setup and request observability middleware.

Every request gets a correlation id and a timing header, and one log
record is emitted per request on the ``mkauth_api.http`` logger.
"""

import logging
import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("mkauth_api")
access_logger = logging.getLogger("mkauth_api.http")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
CORRELATION_HEADER = "X-Correlation-ID"


def configure_logging(level: str = "INFO") -> None:
    """Attach a stream handler to the application logger once."""
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level.upper())


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        response.headers[CORRELATION_HEADER] = correlation_id
        response.headers["X-Process-Time"] = f"{elapsed_ms:.2f}"

        # Path only: the query string may carry the API key
        log_data = {
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(elapsed_ms, 2),
            "ip": request.client.host if request.client else "unknown",
        }

        if response.status_code >= 500:
            access_logger.error("%s %s -> %s", request.method, request.url.path, response.status_code, extra=log_data)
        elif response.status_code >= 400:
            access_logger.warning("%s %s -> %s", request.method, request.url.path, response.status_code, extra=log_data)
        else:
            access_logger.info("%s %s -> %s", request.method, request.url.path, response.status_code, extra=log_data)

        return response
