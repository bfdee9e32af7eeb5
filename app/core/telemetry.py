import logging

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from app.core.config import settings
from app.core.db import engine

log = logging.getLogger(__name__)


def setup_telemetry(app) -> bool:
    """Install OTLP tracing for the API and its database engine. Returns False when disabled."""
    if not settings.telemetry_enabled:
        log.info("telemetry disabled for %s", settings.service_name)
        return False

    resource = Resource.create(
        {
            "service.name": settings.service_name,
            "service.version": app.version,
            "deployment.environment": settings.env,
        }
    )
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=f"{settings.otlp_endpoint}/v1/traces")))
    trace.set_tracer_provider(provider)

    # the health check is polled constantly; keep it out of the traces
    FastAPIInstrumentor.instrument_app(app, excluded_urls="/v1/health")
    SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)
    log.info("telemetry exporting to %s", settings.otlp_endpoint)
    return True
