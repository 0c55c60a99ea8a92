"""Weather service orchestrating the geocoding and weather lookups."""

import structlog
from opentelemetry.trace import Tracer

from cep_weather.domain import WeatherReading, from_celsius
from cep_weather.services.base import LocationResolver, TemperatureResolver

logger = structlog.get_logger()


class WeatherService:
    """Resolves a zipcode to a temperature reading."""

    def __init__(
        self,
        locations: LocationResolver,
        temperatures: TemperatureResolver,
        tracer: Tracer,
    ) -> None:
        """Initialize service with its two resolvers and a tracer."""
        self._locations = locations
        self._temperatures = temperatures
        self._tracer = tracer

    async def get_weather(self, zipcode: str) -> WeatherReading:
        """Get current weather for a zipcode.

        The temperature lookup needs the resolved location, so the two calls
        run one after the other. The first ``ServiceError`` is propagated as
        raised.

        Args:
            zipcode: Eight digit zipcode

        Returns:
            Reading in Celsius, Fahrenheit and Kelvin
        """
        with self._tracer.start_as_current_span("get-weather"):
            location = await self._locations.resolve(zipcode)
            logger.info("Location resolved", city=location.city, state=location.state)

            temp_c = await self._temperatures.resolve(location)
            logger.info("Temperature resolved", city=location.city, temp_c=temp_c)

            return from_celsius(location.city, temp_c)
