"""Payment orchestration.

Resolves one gateway's collaborator set per attempt and runs the fixed
sequence validate -> process -> log, tracking the attempt through the state
machine and recording metrics and a trace span.
"""

from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from threading import Lock
from time import perf_counter

from paygate.common.errors import ProcessorFailure, ProcessorTimeout, ValidatorFailure
from paygate.common.logging import gateway_ctx, logger, transaction_id_ctx
from paygate.common.metrics import (
    payment_e2e_seconds,
    payment_failure_total,
    payment_rejected_total,
    payment_requests_total,
    payment_success_total,
    processor_latency_seconds,
)
from paygate.common.state_machine import is_terminal, validate_transition
from paygate.common.tracing import get_tracer, payment_span
from paygate.gateways.base import (
    CollaboratorSet,
    Gateway,
    PaymentOutcome,
    PaymentRequest,
    TransactionResult,
    ValidationRejected,
)
from paygate.gateways.registry import GatewayFactory

module_tracer = get_tracer(__name__)


class PaymentAttempt:
    """State of one in-flight payment; lives only for the duration of a call."""

    def __init__(self, gateway: str) -> None:
        self.gateway = gateway
        self.state = "RECEIVED"
        self.started = perf_counter()

    def advance(self, new_state: str) -> None:
        validate_transition(self.state, new_state)
        logger.debug("payment transition gateway=%s %s -> %s", self.gateway, self.state, new_state)
        self.state = new_state

    def finish(self, terminal_state: str) -> None:
        if not is_terminal(terminal_state):
            raise ValueError(f"Not a terminal state: {terminal_state}")
        self.advance(terminal_state)
        elapsed = max(0.0, perf_counter() - self.started)
        payment_e2e_seconds.labels(gateway=self.gateway, terminal_state=terminal_state).observe(elapsed)


class PaymentOrchestrator:
    """Single entry point dispatching payments to registered gateways."""

    def __init__(
        self,
        factory: GatewayFactory,
        processor_timeout: float | None = None,
        max_workers: int = 8,
        tracer=None,
    ) -> None:
        self.factory = factory
        self.processor_timeout = processor_timeout or None
        self.max_workers = max_workers
        self.tracer = tracer if tracer is not None else module_tracer
        # One pool per gateway tag, so a hung gateway only exhausts its own workers.
        self._executors: dict[str, ThreadPoolExecutor] = {}
        self._executors_lock = Lock()
        self._closed = False

    def _executor_for(self, gateway: str) -> ThreadPoolExecutor:
        with self._executors_lock:
            if self._closed:
                raise RuntimeError("orchestrator is closed")
            executor = self._executors.get(gateway)
            if executor is None:
                executor = ThreadPoolExecutor(
                    max_workers=self.max_workers,
                    thread_name_prefix=f"paygate-{gateway}",
                )
                self._executors[gateway] = executor
            return executor

    def _run_processor(self, collaborators: CollaboratorSet, request: PaymentRequest) -> str:
        """Call the processor, under a deadline when one is configured."""

        processor = collaborators.processor
        if self.processor_timeout is None:
            return processor.process_transaction(request.amount, request.card_number)

        executor = self._executor_for(collaborators.gateway)
        future = executor.submit(processor.process_transaction, request.amount, request.card_number)
        try:
            return future.result(timeout=self.processor_timeout)
        except FutureTimeout:
            future.cancel()
            raise ProcessorTimeout(collaborators.gateway, self.processor_timeout) from None

    def process_payment(self, amount, card_number: str, gateway: Gateway | str) -> PaymentOutcome:
        """Validate, process and log one payment on the selected gateway.

        Returns `TransactionResult` on success or `ValidationRejected` when the
        card is refused. Raises `InvalidPaymentRequest`, `UnknownGateway`,
        `GatewayMisconfigured`, `ValidatorFailure` or `ProcessorFailure`.
        """

        request = PaymentRequest.build(amount, card_number)
        collaborators = self.factory.create(gateway)
        tag = collaborators.gateway

        gateway_token = gateway_ctx.set(tag)
        try:
            with payment_span(self.tracer, tag) as span:
                outcome = self._dispatch(collaborators, request)
                span.set_attribute("payment.status", outcome.status)
                return outcome
        finally:
            gateway_ctx.reset(gateway_token)

    def _dispatch(self, collaborators: CollaboratorSet, request: PaymentRequest) -> PaymentOutcome:
        tag = collaborators.gateway
        attempt = PaymentAttempt(tag)
        payment_requests_total.labels(gateway=tag).inc()

        try:
            verdict = collaborators.validator.validate_card(request.card_number)
        except Exception as exc:
            attempt.finish("FAILED")
            payment_failure_total.labels(gateway=tag, error_type="ValidatorFailure").inc()
            logger.exception("validator raised gateway=%s", tag)
            raise ValidatorFailure(tag, str(exc)) from exc
        if not verdict:
            attempt.finish("REJECTED")
            payment_rejected_total.labels(gateway=tag).inc()
            reason = getattr(verdict, "reason", None)
            logger.info("card rejected gateway=%s reason=%s", tag, reason.value if reason else None)
            return ValidationRejected(gateway=tag, reason=reason)
        attempt.advance("VALIDATED")

        started = perf_counter()
        try:
            transaction_id = self._run_processor(collaborators, request)
        except ProcessorFailure as exc:
            attempt.finish("FAILED")
            payment_failure_total.labels(gateway=tag, error_type=type(exc).__name__).inc()
            logger.error("processor failed gateway=%s error=%s", tag, exc)
            raise
        except Exception as exc:
            attempt.finish("FAILED")
            payment_failure_total.labels(gateway=tag, error_type="ProcessorFailure").inc()
            logger.exception("processor raised gateway=%s", tag)
            raise ProcessorFailure(tag, str(exc)) from exc
        finally:
            processor_latency_seconds.labels(gateway=tag).observe(max(0.0, perf_counter() - started))
        attempt.advance("PROCESSED")

        result = TransactionResult(transaction_id=transaction_id, gateway=tag)
        tx_token = transaction_id_ctx.set(transaction_id)
        try:
            collaborators.logger.log(f"Transação processada: {transaction_id}")
        except Exception as exc:
            # A failing logger must not override a processed payment.
            logger.warning("transaction logger failed gateway=%s error=%s", tag, exc)
        finally:
            transaction_id_ctx.reset(tx_token)

        attempt.finish("COMPLETED")
        payment_success_total.labels(gateway=tag).inc()
        return result

    def close(self) -> None:
        with self._executors_lock:
            self._closed = True
            executors = list(self._executors.values())
            self._executors.clear()
        for executor in executors:
            executor.shutdown(wait=False, cancel_futures=True)
