"""Test fixtures."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import Tracer

from cep_weather.config import Settings, get_settings
from cep_weather.main import create_gateway_app, create_orchestrator_app

GEOCODER_URL = "https://viacep.test/ws"
WEATHER_API_URL = "https://weatherapi.test/v1"
ORCHESTRATOR_URL = "http://orchestrator.test:8081"
API_KEY = "test-secret-key"


@pytest.fixture(autouse=True)
def clear_settings_cache() -> None:
    """Reset cached settings before each test."""
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Create test settings."""
    return Settings(
        geocoder_url=GEOCODER_URL,
        weather_api_url=WEATHER_API_URL,
        weather_api_key=API_KEY,
        orchestrator_url=ORCHESTRATOR_URL,
        geocoder_timeout_seconds=1.0,
        weather_api_timeout_seconds=1.0,
        orchestrator_timeout_seconds=2.0,
        log_level="DEBUG",
        log_format="text",
    )


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    """Collect finished spans in memory."""
    return InMemorySpanExporter()


@pytest.fixture
def tracer_provider(span_exporter: InMemorySpanExporter) -> TracerProvider:
    """Tracer provider exporting synchronously to the in-memory exporter."""
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return provider


@pytest.fixture
def tracer(tracer_provider: TracerProvider) -> Tracer:
    return tracer_provider.get_tracer("tests")


@pytest.fixture
def orchestrator_app(settings: Settings, tracer_provider: TracerProvider) -> FastAPI:
    """Create test orchestrator application."""
    return create_orchestrator_app(settings, tracer_provider)


@pytest.fixture
def orchestrator_client(orchestrator_app: FastAPI) -> TestClient:
    """Create test client for the orchestrator."""
    return TestClient(orchestrator_app)


@pytest.fixture
def gateway_app(settings: Settings, tracer_provider: TracerProvider) -> FastAPI:
    """Create test gateway application."""
    return create_gateway_app(settings, tracer_provider)


@pytest.fixture
def gateway_client(gateway_app: FastAPI) -> TestClient:
    """Create test client for the gateway."""
    return TestClient(gateway_app)
