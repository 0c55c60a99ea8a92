"""Application entry points for the edge gateway and the weather orchestrator."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import structlog
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from opentelemetry.sdk.trace import TracerProvider
from prometheus_client import make_asgi_app

from cep_weather import __version__
from cep_weather.api.routes import (
    error_response,
    gateway_router,
    health_router,
    orchestrator_router,
)
from cep_weather.config import Settings, get_settings
from cep_weather.errors import GENERIC_ERROR_MESSAGE
from cep_weather.middleware.logging import LoggingMiddleware, configure_logging
from cep_weather.services.geocoding import ViaCepClient
from cep_weather.services.orchestrator import OrchestratorClient
from cep_weather.services.weather import WeatherService
from cep_weather.services.weather_api import WeatherApiClient
from cep_weather.tracing import create_tracer_provider

GATEWAY_SERVICE = "cep-weather-gateway"
ORCHESTRATOR_SERVICE = "cep-weather-orchestrator"

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Flush and stop the tracer provider on shutdown."""
    yield
    app.state.tracer_provider.shutdown()


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Serve unexpected failures as a generic 500."""
    logger.error("Unhandled exception", error_type=type(exc).__name__, exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)


def _create_base_app(
    settings: Settings,
    service_name: str,
    description: str,
    tracer_provider: TracerProvider | None,
) -> FastAPI:
    configure_logging(settings)

    if tracer_provider is None:
        tracer_provider = create_tracer_provider(settings, service_name)

    app = FastAPI(
        title=f"CEP Weather {description}",
        description="Current temperature for a Brazilian zipcode",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.tracer_provider = tracer_provider
    app.state.tracer = tracer_provider.get_tracer(service_name, __version__)

    app.add_middleware(LoggingMiddleware, service=service_name)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(health_router)

    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    return app


def create_orchestrator_app(
    settings: Settings | None = None,
    tracer_provider: TracerProvider | None = None,
) -> FastAPI:
    """Create the orchestrator application.

    Raises:
        ConfigurationError: If the WeatherAPI key is not configured
    """
    settings = settings or get_settings()
    settings.require_weather_api_key()

    app = _create_base_app(settings, ORCHESTRATOR_SERVICE, "Orchestrator", tracer_provider)
    tracer = app.state.tracer

    app.state.weather_provider = WeatherService(
        locations=ViaCepClient(settings, tracer),
        temperatures=WeatherApiClient(settings, tracer),
        tracer=tracer,
    )
    app.state.readiness_checks = {
        "geocoder": "ok" if settings.geocoder_url else "unconfigured",
        "weather_api": "ok" if settings.weather_api_url else "unconfigured",
    }

    app.include_router(orchestrator_router)
    return app


def create_gateway_app(
    settings: Settings | None = None,
    tracer_provider: TracerProvider | None = None,
    orchestrator_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create the edge gateway application."""
    settings = settings or get_settings()

    app = _create_base_app(settings, GATEWAY_SERVICE, "Gateway", tracer_provider)

    app.state.orchestrator_client = OrchestratorClient(settings, transport=orchestrator_transport)
    app.state.readiness_checks = {
        "orchestrator": "ok" if settings.orchestrator_url else "unconfigured",
    }

    app.include_router(gateway_router)
    return app


def run_gateway() -> None:
    """Run the edge gateway with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "cep_weather.main:create_gateway_app",
        factory=True,
        host=settings.app_host,
        port=settings.gateway_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


def run_orchestrator() -> None:
    """Run the weather orchestrator with uvicorn."""
    settings = get_settings()
    settings.require_weather_api_key()
    uvicorn.run(
        "cep_weather.main:create_orchestrator_app",
        factory=True,
        host=settings.app_host,
        port=settings.orchestrator_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
