"""OpenTelemetry tracer provider setup.

Providers are created per application and handed to the components that
need them; nothing is registered on the global OpenTelemetry API.
"""

from collections.abc import Mapping, MutableMapping

import structlog
from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ALWAYS_ON
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from cep_weather import __version__
from cep_weather.config import Settings

logger = structlog.get_logger()

_propagator = TraceContextTextMapPropagator()


def create_tracer_provider(settings: Settings, service_name: str) -> TracerProvider:
    """Create a tracer provider for one service role.

    Spans are exported over OTLP/HTTP when ``tracing_endpoint`` is set and
    dropped otherwise.
    """
    resource = Resource.create({SERVICE_NAME: service_name, SERVICE_VERSION: __version__})
    provider = TracerProvider(resource=resource, sampler=ALWAYS_ON)

    if settings.tracing_endpoint:
        exporter = OTLPSpanExporter(endpoint=settings.tracing_endpoint)
        provider.add_span_processor(BatchSpanProcessor(exporter))
        logger.info(
            "Tracing initialized",
            service=service_name,
            endpoint=settings.tracing_endpoint,
        )
    else:
        logger.info("Tracing exporter disabled", service=service_name)

    return provider


def inject_trace_headers(headers: MutableMapping[str, str]) -> None:
    """Write the current span's W3C trace context into outgoing headers."""
    _propagator.inject(headers)


def extract_trace_context(headers: Mapping[str, str]) -> Context:
    """Read the caller's W3C trace context from incoming headers."""
    return _propagator.extract(headers)


def add_trace_ids(
    _logger: structlog.typing.WrappedLogger,
    _method_name: str,
    event_dict: structlog.typing.EventDict,
) -> structlog.typing.EventDict:
    """structlog processor adding the active trace and span ids."""
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        event_dict["trace_id"] = trace.format_trace_id(span_context.trace_id)
        event_dict["span_id"] = trace.format_span_id(span_context.span_id)
    return event_dict
