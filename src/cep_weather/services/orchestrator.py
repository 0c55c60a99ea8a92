"""Client used by the edge gateway to reach the weather orchestrator."""

from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from cep_weather.api.schemas import WeatherRequest, WeatherResponse
from cep_weather.config import Settings
from cep_weather.errors import (
    GENERIC_ERROR_MESSAGE,
    ErrorCategory,
    RemoteServiceError,
    ServiceError,
)
from cep_weather.metrics import upstream_duration, upstream_requests
from cep_weather.tracing import inject_trace_headers

logger = structlog.get_logger()

UPSTREAM = "orchestrator"


class OrchestratorClient:
    """HTTP client for the orchestrator's ``POST /weather`` endpoint."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize client with settings.

        ``transport`` replaces the network transport, e.g. with an
        ``httpx.ASGITransport`` wrapping an in-process orchestrator.
        """
        self._url = f"{settings.orchestrator_url.rstrip('/')}/weather"
        self._timeout = settings.orchestrator_timeout_seconds
        self._transport = transport

    async def get_weather(self, zipcode: str) -> WeatherResponse:
        """Forward a zipcode to the orchestrator.

        Returns:
            The orchestrator's success body

        Raises:
            RemoteServiceError: The orchestrator answered with a non-200
                status; its status and message are kept as sent
            ServiceError: INTERNAL when the orchestrator cannot be reached or
                its success body is unusable
        """
        headers = {"Content-Type": "application/json"}
        request_id = structlog.contextvars.get_contextvars().get("request_id")
        if request_id:
            headers["X-Request-ID"] = request_id
        inject_trace_headers(headers)
        body = WeatherRequest(cep=zipcode).model_dump()

        with upstream_duration.labels(upstream=UPSTREAM).time():
            try:
                async with httpx.AsyncClient(
                    timeout=self._timeout, transport=self._transport
                ) as client:
                    response = await client.post(self._url, json=body, headers=headers)
            except httpx.TimeoutException as e:
                upstream_requests.labels(upstream=UPSTREAM, outcome="timeout").inc()
                raise ServiceError(
                    ErrorCategory.INTERNAL,
                    f"Orchestrator request timed out after {self._timeout}s",
                ) from e
            except httpx.RequestError as e:
                upstream_requests.labels(upstream=UPSTREAM, outcome="error").inc()
                raise ServiceError(
                    ErrorCategory.INTERNAL, f"Orchestrator request failed: {e}"
                ) from e

        if response.status_code != httpx.codes.OK:
            upstream_requests.labels(upstream=UPSTREAM, outcome="error").inc()
            raise RemoteServiceError(response.status_code, self._error_message(response))

        try:
            result = WeatherResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            upstream_requests.labels(upstream=UPSTREAM, outcome="error").inc()
            raise ServiceError(
                ErrorCategory.INTERNAL, "Orchestrator returned an unusable body"
            ) from e

        upstream_requests.labels(upstream=UPSTREAM, outcome="success").inc()
        return result

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Message from an orchestrator error body, ``{"message": ...}``."""
        try:
            data: Any = response.json()
        except ValueError:
            logger.warning(
                "Orchestrator error body is not JSON",
                status_code=response.status_code,
            )
            return GENERIC_ERROR_MESSAGE

        message = data.get("message") if isinstance(data, dict) else None
        if not isinstance(message, str):
            return GENERIC_ERROR_MESSAGE
        return message
