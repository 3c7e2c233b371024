"""Logging setup and request logging middleware"""

import logging
import sys
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("testimony_prep.api")


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging to stdout"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with timing and tags it with a request id"""

    async def dispatch(self, request, call_next):
        request_id = str(uuid.uuid4())
        start_time = time.time()
        request.state.request_id = request_id

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"Request completed - {request.method} {request.url.path} - "
            f"Status: {response.status_code} - Time: {process_time:.4f}s - ID: {request_id}"
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(process_time)
        return response
