"""Request logging middleware and structlog setup."""

import logging
import time
import uuid
from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from cep_weather.config import Settings
from cep_weather.metrics import observe_request
from cep_weather.tracing import add_trace_ids

REQUEST_ID_HEADER = "X-Request-ID"


def configure_logging(settings: Settings) -> None:
    """Configure structlog for JSON or console output with trace ids."""
    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        add_trace_ids,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    level = logging.getLevelNamesMapping().get(settings.log_level.upper(), logging.INFO)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """Bind a request id, log each request and count it for one service role."""

    def __init__(self, app: ASGIApp, service: str) -> None:
        super().__init__(app)
        self.service = service

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        # An inbound id comes from the gateway, so both roles log the same one
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        method, path = request.method, request.url.path

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id, service=self.service, method=method, path=path
        )
        logger = structlog.get_logger()
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            elapsed = time.perf_counter() - started
            logger.exception("Request failed", duration_ms=round(elapsed * 1000, 2))
            observe_request(self.service, method, path, 500)
            raise

        elapsed = time.perf_counter() - started
        observe_request(self.service, method, path, response.status_code, elapsed)
        logger.info(
            "Request completed",
            status_code=response.status_code,
            duration_ms=round(elapsed * 1000, 2),
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
