"""Configuration du tracing OpenTelemetry pour l'observabilité.

Le tracing n'est activé que si `OTLP_ENDPOINT` est renseigné; les spans sont alors exportés en
OTLP/gRPC.
"""

from __future__ import annotations

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from shelter.core.container import container


def setup_tracing() -> bool:
    """Installe le provider de tracing; retourne False si aucun endpoint n'est configuré."""
    endpoint = container.settings.OTLP_ENDPOINT
    if not endpoint:
        return False

    provider = TracerProvider(resource=Resource.create({"service.name": container.settings.APP_NAME}))
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=True)))
    trace.set_tracer_provider(provider)
    return True
