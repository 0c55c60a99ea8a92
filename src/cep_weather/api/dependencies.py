"""FastAPI dependencies.

Components are built once per application by the app factories and kept on
``app.state``; these functions hand them to the routes.
"""

from typing import Annotated

from fastapi import Depends, Request
from opentelemetry.trace import Tracer

from cep_weather.services.base import WeatherProvider
from cep_weather.services.orchestrator import OrchestratorClient


def get_tracer(request: Request) -> Tracer:
    """Get the tracer of the serving application."""
    tracer: Tracer = request.app.state.tracer
    return tracer


def get_weather_provider(request: Request) -> WeatherProvider:
    """Get the weather use case (orchestrator role)."""
    provider: WeatherProvider = request.app.state.weather_provider
    return provider


def get_orchestrator_client(request: Request) -> OrchestratorClient:
    """Get the downstream orchestrator client (gateway role)."""
    client: OrchestratorClient = request.app.state.orchestrator_client
    return client


def get_readiness_checks(request: Request) -> dict[str, str]:
    """Get the component checks reported by the readiness probe."""
    checks: dict[str, str] = request.app.state.readiness_checks
    return checks


# Type aliases for dependency injection
TracerDep = Annotated[Tracer, Depends(get_tracer)]
WeatherProviderDep = Annotated[WeatherProvider, Depends(get_weather_provider)]
OrchestratorClientDep = Annotated[OrchestratorClient, Depends(get_orchestrator_client)]
ReadinessChecksDep = Annotated[dict[str, str], Depends(get_readiness_checks)]
