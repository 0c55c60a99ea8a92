"""API route definitions."""

from typing import Any

import structlog
from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import JSONResponse
from opentelemetry.trace import Span, SpanKind, Status, StatusCode

from cep_weather.api.dependencies import (
    OrchestratorClientDep,
    ReadinessChecksDep,
    TracerDep,
    WeatherProviderDep,
)
from cep_weather.api.schemas import (
    ErrorResponse,
    HealthResponse,
    ReadinessResponse,
    WeatherRequest,
    WeatherResponse,
)
from cep_weather.domain import validate_zipcode
from cep_weather.errors import RemoteServiceError, ServiceError
from cep_weather.tracing import extract_trace_context

logger = structlog.get_logger()

INVALID_BODY_MESSAGE = "invalid request body"

# Edge gateway: validates locally and forwards to the orchestrator
gateway_router = APIRouter(tags=["gateway"])

# Orchestrator: zipcode -> location -> temperature
orchestrator_router = APIRouter(tags=["orchestrator"])

# Health router for health checks
health_router = APIRouter(prefix="/health", tags=["health"])


ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Malformed request body or invalid location"},
    404: {"model": ErrorResponse, "description": "Zipcode or weather not found"},
    422: {"model": ErrorResponse, "description": "Invalid zipcode"},
    500: {"model": ErrorResponse, "description": "Upstream or internal failure"},
}


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the ``{"message": ...}`` error body."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
    )


def service_error_response(error: ServiceError) -> JSONResponse:
    return error_response(error.status_code, error.public_message)


def record_error(span: Span, error: Exception) -> None:
    """Mark a span as failed with the given error."""
    span.record_exception(error)
    span.set_status(Status(StatusCode.ERROR, str(error)))


async def read_weather_request(request: Request) -> WeatherRequest:
    """Decode the request body.

    Raises:
        ValueError: If the body is not JSON or does not match the schema
    """
    return WeatherRequest.model_validate(await request.json())


def log_service_error(message: str, error: ServiceError, **context: Any) -> None:
    server_side = error.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR
    log = logger.error if server_side else logger.warning
    log(
        message,
        category=error.category.value,
        status_code=error.status_code,
        error=error.message,
        **context,
    )


@gateway_router.post("/weather", response_model=WeatherResponse, responses=ERROR_RESPONSES)
async def forward_weather(
    request: Request,
    client: OrchestratorClientDep,
    tracer: TracerDep,
) -> WeatherResponse | JSONResponse:
    """Validate a zipcode and fetch its weather from the orchestrator.

    Invalid zipcodes are rejected here without calling the orchestrator.
    Orchestrator errors are relayed with their original status and message.
    """
    with tracer.start_as_current_span("handle-request", kind=SpanKind.SERVER):
        with tracer.start_as_current_span("validate-input") as span:
            try:
                body = await read_weather_request(request)
            except ValueError as e:
                record_error(span, e)
                logger.warning("Malformed request body")
                return error_response(status.HTTP_400_BAD_REQUEST, INVALID_BODY_MESSAGE)

            try:
                validate_zipcode(body.cep)
            except ServiceError as e:
                record_error(span, e)
                log_service_error("Zipcode rejected", e)
                return service_error_response(e)

        with tracer.start_as_current_span("call-orchestrator") as span:
            try:
                return await client.get_weather(body.cep)

            except RemoteServiceError as e:
                record_error(span, e)
                logger.warning(
                    "Orchestrator returned an error",
                    status_code=e.status_code,
                    error=e.message,
                )
                return error_response(e.status_code, e.message)

            except ServiceError as e:
                record_error(span, e)
                log_service_error("Orchestrator call failed", e)
                return service_error_response(e)


@orchestrator_router.post("/weather", response_model=WeatherResponse, responses=ERROR_RESPONSES)
async def get_weather(
    request: Request,
    weather_provider: WeatherProviderDep,
    tracer: TracerDep,
) -> WeatherResponse | JSONResponse:
    """Get current weather for a zipcode.

    Returns the temperature in Celsius, Fahrenheit and Kelvin for the city
    the zipcode belongs to.
    """
    parent = extract_trace_context(request.headers)
    with tracer.start_as_current_span(
        "process-weather", context=parent, kind=SpanKind.SERVER
    ) as span:
        try:
            body = await read_weather_request(request)
        except ValueError as e:
            record_error(span, e)
            logger.warning("Malformed request body")
            return error_response(status.HTTP_400_BAD_REQUEST, INVALID_BODY_MESSAGE)

        span.set_attribute("zipcode", body.cep)

        try:
            reading = await weather_provider.get_weather(body.cep)
        except ServiceError as e:
            record_error(span, e)
            log_service_error("Weather lookup failed", e, zipcode=body.cep)
            return service_error_response(e)

        return WeatherResponse.from_reading(reading)


@health_router.get("/live", response_model=HealthResponse)
async def liveness() -> HealthResponse:
    """Liveness probe - checks if the service is running."""
    return HealthResponse(status="ok")


@health_router.get("/ready", response_model=ReadinessResponse)
async def readiness(checks: ReadinessChecksDep) -> ReadinessResponse:
    """Readiness probe - checks if the service is ready to accept traffic."""
    overall_status = "ok" if all(value == "ok" for value in checks.values()) else "unhealthy"

    response = ReadinessResponse(status=overall_status, checks=checks)

    if overall_status != "ok":
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=response.model_dump(),
        )

    return response
