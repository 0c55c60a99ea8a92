"""API request and response schemas."""

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from cep_weather.domain import WeatherReading


class WeatherRequest(BaseModel):
    """Body of ``POST /weather`` on both services.

    A missing ``cep`` decodes to an empty string and fails zipcode
    validation; a non-string ``cep`` is a malformed body.
    """

    model_config = ConfigDict(extra="ignore")

    cep: StrictStr = Field(default="", description="Zipcode, eight digits")


class WeatherResponse(BaseModel):
    """Weather API response."""

    city: str = Field(..., description="City resolved from the zipcode")
    temp_C: float = Field(..., description="Temperature in Celsius")  # noqa: N815
    temp_F: float = Field(..., description="Temperature in Fahrenheit")  # noqa: N815
    temp_K: float = Field(..., description="Temperature in Kelvin")  # noqa: N815

    @classmethod
    def from_reading(cls, reading: WeatherReading) -> "WeatherResponse":
        return cls(
            city=reading.city,
            temp_C=reading.temp_c,
            temp_F=reading.temp_f,
            temp_K=reading.temp_k,
        )


class ErrorResponse(BaseModel):
    """Error response."""

    message: str = Field(..., description="Error message")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Health status")


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    status: str = Field(..., description="Readiness status")
    checks: dict[str, str] = Field(default_factory=dict, description="Component checks")
