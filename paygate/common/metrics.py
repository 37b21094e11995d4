"""Prometheus metric definitions for payment dispatch."""

from prometheus_client import Counter, Histogram, generate_latest
from starlette.responses import Response


payment_requests_total = Counter("payment_requests_total", "Total payment requests", ["gateway"])
payment_success_total = Counter("payment_success_total", "Total completed payments", ["gateway"])
payment_rejected_total = Counter("payment_rejected_total", "Total payments with a rejected card", ["gateway"])
payment_failure_total = Counter(
    "payment_failure_total",
    "Total payments that failed with an error",
    ["gateway", "error_type"],
)
processor_latency_seconds = Histogram(
    "processor_latency_seconds",
    "Transaction processor call duration seconds",
    ["gateway"],
)
payment_e2e_seconds = Histogram(
    "payment_e2e_seconds",
    "Payment duration seconds from RECEIVED to terminal state",
    ["gateway", "terminal_state"],
)


def metrics_response() -> Response:
    """Expose all registered Prometheus metrics in text format."""

    return Response(content=generate_latest(), media_type="text/plain")
