"""OpenTelemetry wiring: provider setup, FastAPI instrumentation and payment spans."""

from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.trace import Status, StatusCode

from paygate.common.config import settings


def setup_tracing(service_name: str, endpoint: str | None = None) -> TracerProvider:
    """Register a tracer provider for this process.

    Spans leave the process only when an OTLP endpoint is configured; without
    one the provider still records spans for in-process processors.
    """

    endpoint = settings.otel_exporter_otlp_endpoint if endpoint is None else endpoint
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    if endpoint:
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
    trace.set_tracer_provider(provider)
    return provider


def instrument_app(app: FastAPI) -> None:
    """Attach FastAPI auto-instrumentation for request spans."""

    FastAPIInstrumentor.instrument_app(app)


def get_tracer(name: str) -> trace.Tracer:
    return trace.get_tracer(name)


@contextmanager
def payment_span(tracer: trace.Tracer, gateway: str) -> Iterator[trace.Span]:
    """Span around one payment attempt, tagged with the gateway.

    Exceptions are recorded on the span and marked as errors before they
    propagate; a rejected card is a normal outcome and leaves the status unset.
    """

    with tracer.start_as_current_span(
        "process_payment",
        attributes={"payment.gateway": gateway},
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
        except Exception as exc:
            span.record_exception(exc)
            span.set_attribute("payment.status", "FAILED")
            span.set_attribute("payment.error_type", type(exc).__name__)
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            raise
