"""Gateway contracts: identities, collaborator protocols and result values.

A gateway family contributes three collaborators that are always used
together for one payment attempt: a card validator, a transaction processor
and a transaction logger. The orchestrator only sees these protocols.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from paygate.common.errors import InvalidPaymentRequest


class Gateway(str, Enum):
    """Built-in gateway identities. The factory also accepts plain string tags."""

    PAGSEGURO = "pagseguro"
    MERCADOPAGO = "mercadopago"
    STRIPE = "stripe"


def gateway_tag(gateway: "Gateway | str") -> str:
    """Normalize a gateway selector to the registry key."""

    if isinstance(gateway, Gateway):
        return gateway.value
    return str(gateway).strip().lower()


class RejectionReason(str, Enum):
    WRONG_LENGTH = "WRONG_LENGTH"
    NOT_NUMERIC = "NOT_NUMERIC"
    WRONG_PREFIX = "WRONG_PREFIX"


class ValidationOutcome(BaseModel):
    """Result of one card check; truthy when the card is accepted."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    reason: RejectionReason | None = None

    def __bool__(self) -> bool:
        return self.valid


ACCEPTED = ValidationOutcome(valid=True)


class PaymentRequest(BaseModel):
    """One payment attempt as handed to the orchestrator."""

    model_config = ConfigDict(frozen=True)

    amount: Decimal
    card_number: str

    @classmethod
    def build(cls, amount, card_number) -> "PaymentRequest":
        """Coerce the amount and enforce `amount > 0` and a non-blank card.

        The card number is kept verbatim; validators see exactly what was sent.
        """

        try:
            value = Decimal(str(amount))
        except ArithmeticError as exc:
            raise InvalidPaymentRequest(f"invalid amount: {amount!r}") from exc
        if not value.is_finite() or value <= 0:
            raise InvalidPaymentRequest(f"amount must be positive, got {amount!r}")
        if not isinstance(card_number, str) or not card_number.strip():
            raise InvalidPaymentRequest("card number must be a non-empty string")
        return cls(amount=value, card_number=card_number)


class TransactionResult(BaseModel):
    """Produced only after successful validation and processing."""

    model_config = ConfigDict(frozen=True)

    transaction_id: str
    gateway: str
    status: str = "COMPLETED"


class ValidationRejected(BaseModel):
    """Card was refused by the gateway validator. No transaction id exists."""

    model_config = ConfigDict(frozen=True)

    gateway: str
    reason: RejectionReason | None = None
    message: str = Field(default="Cartão inválido")
    status: str = "REJECTED"


PaymentOutcome = TransactionResult | ValidationRejected


@runtime_checkable
class CardValidator(Protocol):
    def validate_card(self, card_number: str) -> ValidationOutcome: ...


@runtime_checkable
class TransactionProcessor(Protocol):
    def process_transaction(self, amount: Decimal, card_number: str) -> str: ...


@runtime_checkable
class TransactionLogger(Protocol):
    def log(self, message: str) -> None: ...


class LogSink(Protocol):
    """Destination for formatted gateway log lines."""

    def __call__(self, message: str) -> None: ...


class TokenGenerator(Protocol):
    def __call__(self) -> str: ...


class Clock(Protocol):
    def __call__(self) -> datetime: ...


@dataclass(frozen=True)
class CollaboratorSet:
    """Matched validator/processor/logger triple owned by one gateway."""

    gateway: str
    validator: CardValidator
    processor: TransactionProcessor
    logger: TransactionLogger
