"""Run sample payments through the built-in gateways from the command line.

Without arguments the three reference scenarios run in order; with
`--gateway/--amount/--card` a single payment is sent.
"""

import argparse
import sys
from decimal import Decimal

from paygate.common.errors import PaymentError
from paygate.gateways.base import Gateway, TransactionResult
from paygate.gateways.registry import default_factory
from paygate.gateways.sinks import StreamSink
from paygate.services.orchestrator.service import PaymentOrchestrator

SCENARIOS: list[tuple[Gateway, Decimal, str]] = [
    (Gateway.PAGSEGURO, Decimal("150.00"), "1234567890123456"),
    (Gateway.MERCADOPAGO, Decimal("200.00"), "5234567890123456"),
    (Gateway.STRIPE, Decimal("250.00"), "4234567890123456"),
]


def run_payment(orchestrator: PaymentOrchestrator, gateway, amount, card_number: str, out) -> int:
    """Send one payment and print its outcome; returns a process exit code."""

    try:
        outcome = orchestrator.process_payment(amount, card_number, gateway)
    except PaymentError as exc:
        print(f"Erro: {exc}", file=out)
        return 2
    if isinstance(outcome, TransactionResult):
        print(f"{outcome.gateway}: {outcome.transaction_id}", file=out)
        return 0
    print(outcome.message, file=out)
    return 1


def main(argv: list[str] | None = None, out=None) -> int:
    """Parse CLI args and run the requested payments."""

    out = out if out is not None else sys.stdout
    parser = argparse.ArgumentParser(description="Send sample payments through the built-in gateways.")
    parser.add_argument("--gateway", default=None, help="Gateway tag, e.g. pagseguro, mercadopago, stripe")
    parser.add_argument("--amount", default=None, help="Amount, e.g. 150.00")
    parser.add_argument("--card", default=None, help="Card number")
    parser.add_argument("--timeout", type=float, default=None, help="Processor deadline in seconds")
    args = parser.parse_args(argv)

    single = (args.gateway, args.amount, args.card)
    if any(value is not None for value in single) and not all(value is not None for value in single):
        parser.error("--gateway, --amount and --card must be given together")

    orchestrator = PaymentOrchestrator(
        default_factory(sink=StreamSink(out)),
        processor_timeout=args.timeout,
    )
    try:
        if args.gateway is not None:
            return run_payment(orchestrator, args.gateway, args.amount, args.card, out)

        print("=== Sistema de Pagamentos ===", file=out)
        exit_code = 0
        for gateway, amount, card_number in SCENARIOS:
            print(file=out)
            exit_code = max(exit_code, run_payment(orchestrator, gateway, amount, card_number, out))
        return exit_code
    finally:
        orchestrator.close()


if __name__ == "__main__":
    sys.exit(main())
