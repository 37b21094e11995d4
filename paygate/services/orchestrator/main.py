"""HTTP surface for payment dispatch across registered gateways."""

from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import Depends, FastAPI, Header, HTTPException

from paygate.common.config import settings
from paygate.common.errors import (
    GatewayMisconfigured,
    InvalidPaymentRequest,
    ProcessorFailure,
    ProcessorTimeout,
    UnknownGateway,
    ValidatorFailure,
)
from paygate.common.logging import configure_logging, logger, trace_id_ctx
from paygate.common.metrics import metrics_response
from paygate.common.startup import log_startup_config
from paygate.common.tracing import instrument_app, setup_tracing
from paygate.gateways.base import TransactionResult
from paygate.gateways.registry import default_factory
from paygate.services.orchestrator.schemas import (
    GatewayListResponse,
    PaymentCreateRequest,
    PaymentResponse,
)
from paygate.services.orchestrator.service import PaymentOrchestrator

configure_logging()
setup_tracing(settings.service_name)
service = PaymentOrchestrator(default_factory(), processor_timeout=settings.processor_timeout_seconds)
log_startup_config(settings, service.factory.gateways())

@asynccontextmanager
async def lifespan(_: FastAPI):
    """Release the processor worker pool with the app lifecycle."""

    yield
    service.close()


app = FastAPI(title="PayGate", lifespan=lifespan)
instrument_app(app)


def get_orchestrator() -> PaymentOrchestrator:
    return service


def enforce_api_key(x_api_key: str | None = Header(default=None)) -> None:
    """Reject requests without the configured API key (no-op when none is set)."""

    if settings.api_key and x_api_key != settings.api_key:
        raise HTTPException(status_code=401, detail="invalid API key")


@app.post("/payments", response_model=PaymentResponse, dependencies=[Depends(enforce_api_key)])
def create_payment(
    req: PaymentCreateRequest,
    x_correlation_id: str | None = Header(default=None),
    orchestrator: PaymentOrchestrator = Depends(get_orchestrator),
):
    """Run one payment through the selected gateway.

    A refused card is a normal `200` response with status `REJECTED`.
    """

    trace_token = trace_id_ctx.set(x_correlation_id or str(uuid4()))
    try:
        outcome = orchestrator.process_payment(req.amount, req.card_number, req.gateway)
    except UnknownGateway as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidPaymentRequest as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except ProcessorTimeout as exc:
        raise HTTPException(status_code=504, detail=str(exc)) from exc
    except (ProcessorFailure, ValidatorFailure, GatewayMisconfigured) as exc:
        logger.error("payment failed: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    finally:
        trace_id_ctx.reset(trace_token)

    if isinstance(outcome, TransactionResult):
        return PaymentResponse(
            status=outcome.status,
            gateway=outcome.gateway,
            transaction_id=outcome.transaction_id,
        )
    return PaymentResponse(
        status=outcome.status,
        gateway=outcome.gateway,
        reason=outcome.reason,
        message=outcome.message,
    )


@app.get("/gateways", response_model=GatewayListResponse)
def list_gateways(orchestrator: PaymentOrchestrator = Depends(get_orchestrator)):
    """Registered gateway tags."""

    return GatewayListResponse(gateways=orchestrator.factory.gateways())


@app.get("/metrics")
def metrics():
    """Prometheus scrape endpoint."""

    return metrics_response()


@app.get("/health")
def health():
    """Container health probe endpoint."""

    return {"ok": True}
