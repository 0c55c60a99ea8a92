"""Tests for the WeatherAPI client."""

import asyncio

import httpx
import pytest
import respx
from httpx import Response
from opentelemetry.trace import Tracer
from pydantic import SecretStr

from cep_weather.config import ConfigurationError, Settings
from cep_weather.domain import Location
from cep_weather.errors import ErrorCategory, ServiceError
from cep_weather.services.weather_api import WeatherApiClient, build_query

CURRENT_URL = "https://weatherapi.test/v1/current.json"
BELFORD_ROXO = Location(city="Belford Roxo", state="RJ")


class TestWeatherApiClient:
    """Tests for WeatherApiClient."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_resolve_success(self, settings: Settings, tracer: Tracer) -> None:
        """Test successful fetch sends key, query and aqi."""
        client = WeatherApiClient(settings, tracer)
        route = respx.get(CURRENT_URL).mock(
            return_value=Response(200, json={"current": {"temp_c": 25.5, "temp_f": 77.9}})
        )

        result = await client.resolve(BELFORD_ROXO)

        assert result == 25.5
        params = route.calls.last.request.url.params
        assert params["q"] == "Belford Roxo, RJ, Brazil"
        assert params["key"] == "test-secret-key"
        assert params["aqi"] == "no"

    @respx.mock
    @pytest.mark.asyncio
    async def test_integer_temperature(self, settings: Settings, tracer: Tracer) -> None:
        client = WeatherApiClient(settings, tracer)
        respx.get(CURRENT_URL).mock(return_value=Response(200, json={"current": {"temp_c": 30}}))

        assert await client.resolve(BELFORD_ROXO) == 30.0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("location", [None, Location(city="", state="RJ")])
    async def test_invalid_location_makes_no_call(
        self, settings: Settings, tracer: Tracer, location: Location | None
    ) -> None:
        """Test missing location or city fails before the network."""
        client = WeatherApiClient(settings, tracer)

        with respx.mock(assert_all_called=False) as respx_mock:
            route = respx_mock.get(CURRENT_URL).mock(return_value=Response(200, json={}))

            with pytest.raises(ServiceError) as exc_info:
                await client.resolve(location)

        assert exc_info.value.category is ErrorCategory.INVALID_LOCATION
        assert route.call_count == 0

    @respx.mock
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status_code", "category"),
        [
            (400, ErrorCategory.WEATHER_NOT_FOUND),
            (401, ErrorCategory.UPSTREAM_AUTH_FAILURE),
            (403, ErrorCategory.UPSTREAM_UNAVAILABLE),
            (429, ErrorCategory.UPSTREAM_UNAVAILABLE),
            (500, ErrorCategory.UPSTREAM_UNAVAILABLE),
            (503, ErrorCategory.UPSTREAM_UNAVAILABLE),
        ],
    )
    async def test_status_mapping(
        self,
        settings: Settings,
        tracer: Tracer,
        status_code: int,
        category: ErrorCategory,
    ) -> None:
        """Test upstream statuses map to error categories."""
        client = WeatherApiClient(settings, tracer)
        respx.get(CURRENT_URL).mock(
            return_value=Response(status_code, json={"error": {"message": "nope"}})
        )

        with pytest.raises(ServiceError) as exc_info:
            await client.resolve(BELFORD_ROXO)

        assert exc_info.value.category is category

    @respx.mock
    @pytest.mark.asyncio
    async def test_unavailable_message_has_status(self, settings: Settings, tracer: Tracer) -> None:
        client = WeatherApiClient(settings, tracer)
        respx.get(CURRENT_URL).mock(return_value=Response(503, text="Service Unavailable"))

        with pytest.raises(ServiceError) as exc_info:
            await client.resolve(BELFORD_ROXO)

        assert "503" in exc_info.value.message

    @respx.mock
    @pytest.mark.asyncio
    async def test_auth_failure_does_not_leak_key(self, settings: Settings, tracer: Tracer) -> None:
        """Test the API key and upstream text stay out of the error."""
        client = WeatherApiClient(settings, tracer)
        respx.get(CURRENT_URL).mock(
            return_value=Response(
                401,
                json={"error": {"code": 2006, "message": "API key test-secret-key is invalid."}},
            )
        )

        with pytest.raises(ServiceError) as exc_info:
            await client.resolve(BELFORD_ROXO)

        assert "test-secret-key" not in exc_info.value.message
        assert "is invalid." not in exc_info.value.message

    @respx.mock
    @pytest.mark.asyncio
    async def test_transport_error_is_internal(self, settings: Settings, tracer: Tracer) -> None:
        """Test transport failures are internal and keep the key out."""
        client = WeatherApiClient(settings, tracer)
        respx.get(CURRENT_URL).mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(ServiceError) as exc_info:
            await client.resolve(BELFORD_ROXO)

        assert exc_info.value.category is ErrorCategory.INTERNAL
        assert "test-secret-key" not in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @respx.mock
    @pytest.mark.asyncio
    async def test_timeout_is_internal(self, settings: Settings, tracer: Tracer) -> None:
        client = WeatherApiClient(settings, tracer)
        respx.get(CURRENT_URL).mock(side_effect=httpx.TimeoutException("timeout"))

        with pytest.raises(ServiceError) as exc_info:
            await client.resolve(BELFORD_ROXO)

        assert exc_info.value.category is ErrorCategory.INTERNAL

    @respx.mock
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            Response(200, text="not json"),
            Response(200, json=[1, 2, 3]),
            Response(200, json={}),
            Response(200, json={"current": {}}),
            Response(200, json={"current": {"temp_c": "hot"}}),
            Response(200, text='{"current": {"temp_c": Infinity}}'),
            Response(200, text='{"current": {"temp_c": NaN}}'),
            Response(200, text='{"current": {"temp_c": -Infinity}}'),
        ],
    )
    async def test_unusable_body_is_internal(
        self, settings: Settings, tracer: Tracer, response: Response
    ) -> None:
        """Test undecodable or incomplete bodies are internal errors."""
        client = WeatherApiClient(settings, tracer)
        respx.get(CURRENT_URL).mock(return_value=response)

        with pytest.raises(ServiceError) as exc_info:
            await client.resolve(BELFORD_ROXO)

        assert exc_info.value.category is ErrorCategory.INTERNAL

    @respx.mock
    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, settings: Settings, tracer: Tracer) -> None:
        """Test cancelling the caller aborts the request as CancelledError."""
        client = WeatherApiClient(settings, tracer)
        started = asyncio.Event()

        async def stall(request: httpx.Request) -> Response:
            started.set()
            await asyncio.sleep(10)
            return Response(200, json={"current": {"temp_c": 25.5}})

        respx.get(CURRENT_URL).mock(side_effect=stall)

        task = asyncio.create_task(client.resolve(BELFORD_ROXO))
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

    def test_missing_api_key_is_fatal(self, settings: Settings, tracer: Tracer) -> None:
        """Test the client cannot be built without an API key."""
        settings = settings.model_copy(update={"weather_api_key": SecretStr("")})

        with pytest.raises(ConfigurationError):
            WeatherApiClient(settings, tracer)


def test_build_query() -> None:
    assert build_query(BELFORD_ROXO) == "Belford Roxo, RJ, Brazil"
