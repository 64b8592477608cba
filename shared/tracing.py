"""
OpenTelemetry setup for the pimbridge FastAPI app.

Only imported when `tracing_enabled` is true in config.json; spans are exported
over OTLP/gRPC to the endpoint configured under `otlp.endpoint`.
"""

from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from shared.config import get_config


def setup_tracing(app, service_name: str):
    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

    endpoint = get_config()["otlp"]["endpoint"]

    trace.set_tracer_provider(
        TracerProvider(
            resource=Resource.create({SERVICE_NAME: service_name})
        )
    )
    otlp_exporter = OTLPSpanExporter(endpoint=endpoint, insecure=True)

    trace.get_tracer_provider().add_span_processor(
        BatchSpanProcessor(otlp_exporter)
    )

    FastAPIInstrumentor.instrument_app(app)
