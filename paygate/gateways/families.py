"""Built-in gateway families: PagSeguro, MercadoPago and Stripe.

Every family is a composition of the same three parameterised collaborators;
vendors differ only in their parameters.
"""

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from paygate.common.logging import logger
from paygate.gateways.base import (
    ACCEPTED,
    Clock,
    LogSink,
    RejectionReason,
    TokenGenerator,
    ValidationOutcome,
)
from paygate.gateways.registry import GatewayFamily

CARD_LENGTH = 16


def random_token() -> str:
    """Eight alphanumeric characters; best-effort unique."""

    return uuid4().hex[:8]


class DigitCardValidator:
    """Accept cards of exactly `length` digits, optionally with a leading prefix."""

    def __init__(self, name: str, length: int = CARD_LENGTH, prefix: str | None = None) -> None:
        self.name = name
        self.length = length
        self.prefix = prefix

    def validate_card(self, card_number: str) -> ValidationOutcome:
        logger.debug("%s: Validando cartão...", self.name)
        if len(card_number) != self.length:
            return ValidationOutcome(valid=False, reason=RejectionReason.WRONG_LENGTH)
        if not (card_number.isascii() and card_number.isdigit()):
            return ValidationOutcome(valid=False, reason=RejectionReason.NOT_NUMERIC)
        if self.prefix and not card_number.startswith(self.prefix):
            return ValidationOutcome(valid=False, reason=RejectionReason.WRONG_PREFIX)
        return ACCEPTED


class PrefixedTransactionProcessor:
    """Stand-in processor returning `<prefix>-<token>` transaction ids."""

    def __init__(
        self,
        name: str,
        prefix: str,
        currency_symbol: str,
        token_generator: TokenGenerator = random_token,
    ) -> None:
        self.name = name
        self.prefix = prefix
        self.currency_symbol = currency_symbol
        self.token_generator = token_generator

    def process_transaction(self, amount: Decimal, card_number: str) -> str:
        logger.info("%s: Processando %s %s...", self.name, self.currency_symbol, amount)
        return f"{self.prefix}-{self.token_generator()}"


class TimestampedLogger:
    """Format `[<name> Log] <timestamp>: <message>` and hand it to a sink.

    Sink errors are reported and dropped; they never reach the caller.
    """

    def __init__(self, name: str, sink: LogSink, clock: Clock = datetime.now) -> None:
        self.name = name
        self.sink = sink
        self.clock = clock

    def format(self, message: str) -> str:
        timestamp = self.clock().strftime("%Y-%m-%d %H:%M:%S")
        return f"[{self.name} Log] {timestamp}: {message}"

    def log(self, message: str) -> None:
        try:
            self.sink(self.format(message))
        except Exception as exc:
            logger.warning("gateway log sink failed gateway=%s error=%s", self.name, exc)


def vendor_family(
    tag: str,
    name: str,
    prefix: str,
    currency_symbol: str,
    card_prefix: str | None = None,
) -> GatewayFamily:
    """Describe a vendor whose collaborators are the stock parameterised ones."""

    return GatewayFamily(
        tag=tag,
        name=name,
        build_validator=lambda: DigitCardValidator(name, prefix=card_prefix),
        build_processor=lambda tokens: PrefixedTransactionProcessor(name, prefix, currency_symbol, tokens),
        build_logger=lambda sink, clock: TimestampedLogger(name, sink, clock),
    )


PAGSEGURO = vendor_family("pagseguro", "PagSeguro", "PAGSEG", "R$")
MERCADOPAGO = vendor_family("mercadopago", "MercadoPago", "MP", "R$", card_prefix="5")
STRIPE = vendor_family("stripe", "Stripe", "STRIPE", "$", card_prefix="4")

BUILTIN_FAMILIES = (PAGSEGURO, MERCADOPAGO, STRIPE)
