"""Built-in gateway collaborators: card rules, transaction ids and log lines."""

import re
from decimal import Decimal

import pytest

from paygate.common.errors import InvalidPaymentRequest
from paygate.gateways.base import PaymentRequest, RejectionReason
from paygate.gateways.families import (
    DigitCardValidator,
    PrefixedTransactionProcessor,
    TimestampedLogger,
    random_token,
)
from paygate.gateways.sinks import StreamSink


@pytest.mark.parametrize(
    "prefix,card,valid,reason",
    [
        (None, "1234567890123456", True, None),
        (None, "123456789012345", False, RejectionReason.WRONG_LENGTH),
        (None, "12345678901234567", False, RejectionReason.WRONG_LENGTH),
        (None, "12345678901234ab", False, RejectionReason.NOT_NUMERIC),
        ("5", "5234567890123456", True, None),
        ("5", "1234567890123456", False, RejectionReason.WRONG_PREFIX),
        ("4", "4234567890123456", True, None),
        ("4", "5234567890123456", False, RejectionReason.WRONG_PREFIX),
    ],
)
def test_digit_card_validator(prefix, card, valid, reason):
    outcome = DigitCardValidator("Test", prefix=prefix).validate_card(card)

    assert bool(outcome) is valid
    assert outcome.reason == reason


def test_validation_is_idempotent():
    validator = DigitCardValidator("MercadoPago", prefix="5")

    for card in ("5234567890123456", "1234567890123456", ""):
        assert validator.validate_card(card) == validator.validate_card(card)


def test_processor_builds_prefixed_id():
    processor = PrefixedTransactionProcessor("Stripe", "STRIPE", "$", token_generator=lambda: "AbC12345")

    assert processor.process_transaction(Decimal("250.00"), "4234567890123456") == "STRIPE-AbC12345"


def test_random_token_shape():
    tokens = {random_token() for _ in range(50)}

    assert all(re.fullmatch(r"[A-Za-z0-9]{8}", token) for token in tokens)
    assert len(tokens) > 1


def test_logger_formats_line(sink, clock):
    TimestampedLogger("PagSeguro", sink, clock).log("Transação processada: PAGSEG-1")

    assert sink.lines == ["[PagSeguro Log] 2024-05-17 10:30:00: Transação processada: PAGSEG-1"]


def test_logger_swallows_sink_errors(clock, caplog):
    def broken(message):
        raise OSError("disk full")

    TimestampedLogger("Stripe", broken, clock).log("hello")

    assert "gateway log sink failed" in caplog.text


def test_stream_sink_writes_lines(capsys):
    sink = StreamSink()
    sink("one")
    sink("two")

    assert capsys.readouterr().out == "one\ntwo\n"


@pytest.mark.parametrize("amount", [0, -1, "0.00", "abc", "NaN"])
def test_payment_request_rejects_bad_amount(amount):
    with pytest.raises(InvalidPaymentRequest):
        PaymentRequest.build(amount, "1234567890123456")


def test_payment_request_rejects_empty_card():
    with pytest.raises(InvalidPaymentRequest):
        PaymentRequest.build(Decimal("10"), "  ")


def test_payment_request_coerces_amount():
    request = PaymentRequest.build(150.5, "1234567890123456")

    assert request.amount == Decimal("150.5")
