"""
Minimal OpenTelemetry tracing bootstrap.
- Initializes a TracerProvider with a Console exporter.
- Instruments the FastAPI app when one is passed.
- Idempotent: safe to call multiple times.
"""
from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

_OTEL_INITIALIZED = False


def init_tracing(service_name: str, app: Optional[FastAPI] = None) -> trace.Tracer:
    """// initialize otel tracer (idempotent)"""
    global _OTEL_INITIALIZED

    if not _OTEL_INITIALIZED:
        # Resource: service.name is important for trace grouping
        resource = Resource.create({"service.name": service_name})
        provider = TracerProvider(resource=resource)
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
        trace.set_tracer_provider(provider)
        _OTEL_INITIALIZED = True

    if app is not None:
        FastAPIInstrumentor.instrument_app(app)

    return trace.get_tracer(service_name)
