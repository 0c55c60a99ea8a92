"""Domain values: zipcodes, locations and temperature readings."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from cep_weather.errors import ErrorCategory, ServiceError

ZIPCODE_LENGTH = 8

_ONE_DECIMAL = Decimal("0.1")
_FAHRENHEIT_FACTOR = Decimal("1.8")
_FAHRENHEIT_OFFSET = Decimal(32)
_KELVIN_OFFSET = Decimal(273)


def is_valid_zipcode(zipcode: str) -> bool:
    """Return True for exactly eight ASCII digits."""
    return len(zipcode) == ZIPCODE_LENGTH and zipcode.isascii() and zipcode.isdigit()


def validate_zipcode(zipcode: str) -> None:
    """Raise an INVALID_ZIPCODE error unless ``zipcode`` is eight ASCII digits.

    No normalization is done: ``"26140-040"`` is rejected, not stripped.
    """
    if not isinstance(zipcode, str) or not is_valid_zipcode(zipcode):
        raise ServiceError(ErrorCategory.INVALID_ZIPCODE)


def format_zipcode(zipcode: str) -> str:
    """Insert the hyphen after the fifth digit (``26140040`` -> ``26140-040``)."""
    if len(zipcode) == ZIPCODE_LENGTH:
        return f"{zipcode[:5]}-{zipcode[5:]}"
    return zipcode


@dataclass(frozen=True, slots=True)
class Location:
    """City and state resolved from a zipcode."""

    city: str
    state: str


@dataclass(frozen=True, slots=True)
class WeatherReading:
    """Current temperature for a city in three scales."""

    city: str
    temp_c: float
    temp_f: float
    temp_k: float


def _round_one_decimal(value: Decimal) -> float:
    return float(value.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def from_celsius(city: str, temp_c: float) -> WeatherReading:
    """Build a reading from a Celsius temperature.

    Each scale is derived from the unrounded Celsius value and then rounded
    to one decimal, half away from zero.
    """
    celsius = Decimal(str(temp_c))
    return WeatherReading(
        city=city,
        temp_c=_round_one_decimal(celsius),
        temp_f=_round_one_decimal(celsius * _FAHRENHEIT_FACTOR + _FAHRENHEIT_OFFSET),
        temp_k=_round_one_decimal(celsius + _KELVIN_OFFSET),
    )
