"""
Tracer initialization and configuration for OpenTelemetry.

Exporters are opt-in: an OTLP endpoint (argument or ``OTLP_ENDPOINT``) or
console export (argument or ``TRACE_CONSOLE=true``). Without either the
provider records spans but ships them nowhere.
"""

import logging
import os
import threading

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

logger = logging.getLogger(__name__)

_tracer: trace.Tracer | None = None
_provider: TracerProvider | None = None
_lock = threading.Lock()


def initialize_tracing(
    service_name: str = "tablesync",
    otlp_endpoint: str | None = None,
    console_export: bool = False,
    sampling_rate: float = 1.0,
) -> trace.Tracer:
    """
    Create the process tracer used by reconcile, render and sync spans.

    The provider is kept module-local instead of being installed as the
    global OpenTelemetry provider. A second call returns the first tracer.

    Args:
        service_name: ``service.name`` resource attribute
        otlp_endpoint: gRPC collector address such as "localhost:4317"
        console_export: Print finished spans to stdout
        sampling_rate: Fraction of traces kept, 0.0 to 1.0
    """
    global _tracer, _provider

    with _lock:
        if _tracer is not None:
            logger.debug("Tracing already initialized, returning existing tracer")
            return _tracer

        provider = TracerProvider(
            resource=Resource(attributes={SERVICE_NAME: service_name}),
            sampler=TraceIdRatioBased(sampling_rate),
        )

        exporters = []

        otlp_endpoint = otlp_endpoint or os.getenv("OTLP_ENDPOINT")
        if otlp_endpoint:
            provider.add_span_processor(
                BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
            )
            exporters.append("OTLP")
            logger.info(f"OTLP exporter configured: {otlp_endpoint}")

        if console_export or os.getenv("TRACE_CONSOLE", "").lower() == "true":
            provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
            exporters.append("Console")

        if not exporters:
            logger.debug("No trace exporters configured, spans stay in-process")

        _provider = provider
        _tracer = provider.get_tracer(service_name)

        logger.info(
            f"Tracing initialized: {service_name} "
            f"(exporters: {', '.join(exporters) or 'none'}, sampling: {sampling_rate})"
        )

        return _tracer


def get_tracer() -> trace.Tracer:
    """
    Get the tracer instance, initializing with defaults on first use.
    """
    if _tracer is None:
        return initialize_tracing()
    return _tracer


def shutdown_tracing() -> None:
    """
    Flush pending spans and drop the tracer.

    Should be called before application exit.
    """
    global _tracer, _provider

    with _lock:
        if _provider is not None:
            _provider.shutdown()
            logger.info("Tracing shutdown complete")
        _provider = None
        _tracer = None
