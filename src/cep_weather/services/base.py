"""Capability interfaces for the lookup pipeline.

Each interface has one method and is satisfied by a real HTTP client and,
in tests, by a plain stand-in object.
"""

from typing import Protocol

from cep_weather.domain import Location, WeatherReading


class LocationResolver(Protocol):
    """Resolves a zipcode to a city and state."""

    async def resolve(self, zipcode: str) -> Location:
        """Return the location for ``zipcode`` or raise ``ServiceError``."""
        ...


class TemperatureResolver(Protocol):
    """Resolves a location to its current Celsius temperature."""

    async def resolve(self, location: Location | None) -> float:
        """Return the temperature in Celsius or raise ``ServiceError``."""
        ...


class WeatherProvider(Protocol):
    """Use case exposed to the HTTP layer."""

    async def get_weather(self, zipcode: str) -> WeatherReading:
        """Return the reading for ``zipcode`` or raise ``ServiceError``."""
        ...
