"""ViaCEP geocoding client."""

from typing import Any

import httpx
import structlog
from opentelemetry.trace import Tracer

from cep_weather.config import Settings
from cep_weather.domain import Location, format_zipcode, validate_zipcode
from cep_weather.errors import ErrorCategory, ServiceError
from cep_weather.metrics import upstream_duration, upstream_requests

logger = structlog.get_logger()

UPSTREAM = "viacep"


class ViaCepClient:
    """HTTP client for the ViaCEP zipcode API."""

    def __init__(self, settings: Settings, tracer: Tracer) -> None:
        """Initialize client with settings and a tracer."""
        self._base_url = settings.geocoder_url.rstrip("/")
        self._timeout = settings.geocoder_timeout_seconds
        self._tracer = tracer

    async def resolve(self, zipcode: str) -> Location:
        """Resolve a zipcode to its city and state.

        Args:
            zipcode: Eight digit zipcode, without hyphen

        Returns:
            Location built from the ViaCEP payload

        Raises:
            ServiceError: INVALID_ZIPCODE before any call is made,
                ZIPCODE_NOT_FOUND when ViaCEP has no match, INTERNAL for
                transport failures and unusable responses
        """
        with self._tracer.start_as_current_span("fetch-zipcode") as span:
            span.set_attribute("zipcode", zipcode)
            validate_zipcode(zipcode)

            url = f"{self._base_url}/{format_zipcode(zipcode)}/json/"
            data = await self._fetch(url)
            return self._parse_response(data)

    async def _fetch(self, url: str) -> Any:
        with upstream_duration.labels(upstream=UPSTREAM).time():
            try:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(url)
            except httpx.TimeoutException as e:
                upstream_requests.labels(upstream=UPSTREAM, outcome="timeout").inc()
                raise ServiceError(
                    ErrorCategory.INTERNAL,
                    f"ViaCEP request timed out after {self._timeout}s",
                ) from e
            except httpx.RequestError as e:
                upstream_requests.labels(upstream=UPSTREAM, outcome="error").inc()
                raise ServiceError(
                    ErrorCategory.INTERNAL, f"ViaCEP request failed: {e}"
                ) from e

        if response.status_code != httpx.codes.OK:
            upstream_requests.labels(upstream=UPSTREAM, outcome="error").inc()
            raise ServiceError(
                ErrorCategory.INTERNAL,
                f"ViaCEP returned status {response.status_code}",
            )

        try:
            data = response.json()
        except ValueError as e:
            upstream_requests.labels(upstream=UPSTREAM, outcome="error").inc()
            raise ServiceError(
                ErrorCategory.INTERNAL, "ViaCEP response is not valid JSON"
            ) from e

        upstream_requests.labels(upstream=UPSTREAM, outcome="success").inc()
        return data

    def _parse_response(self, data: Any) -> Location:
        """Parse a ViaCEP payload.

        ViaCEP answers unknown zipcodes with 200 and ``{"erro": true}``;
        older deployments send the flag as the string ``"true"``.
        """
        if not isinstance(data, dict):
            raise ServiceError(ErrorCategory.INTERNAL, "ViaCEP response is not an object")

        not_found = str(data.get("erro", "")).lower() == "true"
        city = data.get("localidade") or ""
        if not_found or not city:
            logger.info("Zipcode not found upstream", upstream=UPSTREAM)
            raise ServiceError(ErrorCategory.ZIPCODE_NOT_FOUND)

        return Location(city=str(city), state=str(data.get("uf") or ""))
