"""Structured logging setup and request logging middleware."""

import logging
import time
import uuid
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from src.core.settings import get_settings

settings = get_settings()

SENSITIVE_HEADERS = {"authorization", "cookie", "x-api-key"}


def configure_logging():
    """Configure structlog over stdlib logging with JSON output."""
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, settings.log_level),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request with a request id, the calling artist and timing.

    The request id is echoed back in the ``X-Request-ID`` header.
    """

    def __init__(self, app, logger_name: str = "harmoniq.http"):
        super().__init__(app)
        self.logger = structlog.get_logger(logger_name)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.perf_counter()

        context = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "artist_id": getattr(request.state, "artist_id", None),
            "client_ip": self._get_client_ip(request),
        }
        if settings.debug:
            context["headers"] = {
                key: "[REDACTED]" if key.lower() in SENSITIVE_HEADERS else value
                for key, value in request.headers.items()
            }

        self.logger.info("HTTP request started", query_params=dict(request.query_params), **context)

        try:
            response = await call_next(request)
        except Exception as e:
            self.logger.error(
                "HTTP request failed with exception",
                error_type=type(e).__name__,
                error_message=str(e),
                process_time_ms=self._elapsed_ms(start_time),
                **context,
            )
            raise

        context["status_code"] = response.status_code
        context["process_time_ms"] = self._elapsed_ms(start_time)

        if response.status_code < 400:
            self.logger.info("HTTP request completed successfully", **context)
        elif response.status_code < 500:
            self.logger.warning("HTTP request completed with client error", **context)
        else:
            self.logger.error("HTTP request completed with server error", **context)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(context["process_time_ms"])
        return response

    @staticmethod
    def _elapsed_ms(start_time: float) -> float:
        return round((time.perf_counter() - start_time) * 1000, 2)

    @staticmethod
    def _get_client_ip(request: Request) -> str:
        """Client address, honouring proxy headers."""
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip

        if request.client:
            return request.client.host

        return "unknown"
