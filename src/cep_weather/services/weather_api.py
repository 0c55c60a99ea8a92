"""WeatherAPI client."""

import math
from typing import Any

import httpx
import structlog
from opentelemetry.trace import Tracer

from cep_weather.config import Settings
from cep_weather.domain import Location
from cep_weather.errors import ErrorCategory, ServiceError
from cep_weather.metrics import upstream_duration, upstream_requests

logger = structlog.get_logger()

UPSTREAM = "weatherapi"
COUNTRY = "Brazil"


def build_query(location: Location) -> str:
    """Free-text query understood by WeatherAPI."""
    return f"{location.city}, {location.state}, {COUNTRY}"


class WeatherApiClient:
    """HTTP client for the WeatherAPI current conditions endpoint."""

    def __init__(self, settings: Settings, tracer: Tracer) -> None:
        """Initialize client with settings and a tracer.

        Raises:
            ConfigurationError: If no API key is configured
        """
        self._url = f"{settings.weather_api_url.rstrip('/')}/current.json"
        self._api_key = settings.require_weather_api_key()
        self._timeout = settings.weather_api_timeout_seconds
        self._tracer = tracer

    async def resolve(self, location: Location | None) -> float:
        """Fetch the current temperature for a location.

        Args:
            location: City and state, city must be non-empty

        Returns:
            Temperature in Celsius

        Raises:
            ServiceError: INVALID_LOCATION before any call is made,
                WEATHER_NOT_FOUND on upstream 400, UPSTREAM_AUTH_FAILURE on
                401, UPSTREAM_UNAVAILABLE on any other non-200 status and
                INTERNAL for transport failures and unusable bodies
        """
        with self._tracer.start_as_current_span("fetch-weather") as span:
            if location is None or not location.city:
                raise ServiceError(ErrorCategory.INVALID_LOCATION)

            span.set_attribute("city", location.city)
            span.set_attribute("state", location.state)

            params = {"key": self._api_key, "q": build_query(location), "aqi": "no"}
            response = await self._fetch(params)
            return self._parse_response(response)

    async def _fetch(self, params: dict[str, str]) -> httpx.Response:
        # Error texts never include the request URL, it carries the API key.
        with upstream_duration.labels(upstream=UPSTREAM).time():
            try:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(self._url, params=params)
            except httpx.TimeoutException as e:
                upstream_requests.labels(upstream=UPSTREAM, outcome="timeout").inc()
                raise ServiceError(
                    ErrorCategory.INTERNAL,
                    f"WeatherAPI request timed out after {self._timeout}s",
                ) from e
            except httpx.RequestError as e:
                upstream_requests.labels(upstream=UPSTREAM, outcome="error").inc()
                raise ServiceError(
                    ErrorCategory.INTERNAL,
                    f"WeatherAPI request failed: {type(e).__name__}",
                ) from e

        if response.status_code == httpx.codes.UNAUTHORIZED:
            upstream_requests.labels(upstream=UPSTREAM, outcome="unauthorized").inc()
            logger.error("WeatherAPI rejected the API key", upstream=UPSTREAM)
            raise ServiceError(ErrorCategory.UPSTREAM_AUTH_FAILURE)

        if response.status_code == httpx.codes.BAD_REQUEST:
            upstream_requests.labels(upstream=UPSTREAM, outcome="not_found").inc()
            raise ServiceError(ErrorCategory.WEATHER_NOT_FOUND)

        if response.status_code != httpx.codes.OK:
            upstream_requests.labels(upstream=UPSTREAM, outcome="error").inc()
            raise ServiceError(
                ErrorCategory.UPSTREAM_UNAVAILABLE,
                f"weather service unavailable: status {response.status_code}",
            )

        upstream_requests.labels(upstream=UPSTREAM, outcome="success").inc()
        return response

    def _parse_response(self, response: httpx.Response) -> float:
        """Extract ``current.temp_c`` from a WeatherAPI body.

        Raises:
            ServiceError: INTERNAL if the body is not JSON or lacks the field
        """
        try:
            data: Any = response.json()
        except ValueError as e:
            raise ServiceError(
                ErrorCategory.INTERNAL, "WeatherAPI response is not valid JSON"
            ) from e

        current = data.get("current") if isinstance(data, dict) else None
        if not isinstance(current, dict):
            raise ServiceError(ErrorCategory.INTERNAL, "Missing 'current' field in response")

        temp_c = current.get("temp_c")
        if isinstance(temp_c, bool) or not isinstance(temp_c, int | float):
            raise ServiceError(ErrorCategory.INTERNAL, "Missing 'temp_c' in 'current' field")
        try:
            value = float(temp_c)
        except OverflowError as e:
            raise ServiceError(ErrorCategory.INTERNAL, "'temp_c' out of range") from e
        if not math.isfinite(value):
            raise ServiceError(ErrorCategory.INTERNAL, f"Non-finite 'temp_c': {value}")

        return value
