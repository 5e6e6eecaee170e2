"""Request logging middleware and utilities."""

import logging
import sys
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from bankr.config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("bankr")


def setup_logging(debug: bool | None = None) -> logging.Logger:
    """Configure application logging.

    Safe to call more than once: the console handler is only installed the
    first time.
    """
    if debug is None:
        debug = get_settings().debug
    log_level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if not any(getattr(h, "_bankr_handler", False) for h in root_logger.handlers):
        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler._bankr_handler = True
        root_logger.addHandler(console_handler)

    for handler in root_logger.handlers:
        if getattr(handler, "_bankr_handler", False):
            handler.setLevel(log_level)

    logger.setLevel(log_level)

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("elastic_transport").setLevel(logging.WARNING)
    logging.getLogger("elasticsearch").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return logger


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request on arrival and completion, tagged with a short id.

    Responses carry the id in ``X-Request-ID`` and the handling time in
    ``X-Process-Time``. Paths starting with one of ``skip_paths`` pass
    through untouched.
    """

    def __init__(self, app, skip_paths: tuple[str, ...] = ()):
        super().__init__(app)
        self.skip_paths = skip_paths

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if self.skip_paths and path.startswith(self.skip_paths):
            return await call_next(request)

        request_id = uuid.uuid4().hex[:8]
        query = f"?{request.url.query}" if request.url.query else ""
        logger.info("[%s] %s %s%s", request_id, request.method, path, query)

        start_time = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        level = logging.INFO if response.status_code < 400 else logging.WARNING
        logger.log(level, "[%s] %d in %.1fms", request_id, response.status_code, elapsed_ms)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{elapsed_ms:.1f}ms"
        return response
