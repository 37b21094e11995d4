"""Shared fixtures: deterministic tokens, fixed clock, in-memory sink and spy gateways."""

import itertools
import time
from datetime import datetime

import pytest

from paygate.gateways.base import ACCEPTED
from paygate.gateways.registry import GatewayFamily, default_factory
from paygate.services.orchestrator.service import PaymentOrchestrator


class CollectingSink:
    def __init__(self) -> None:
        self.lines: list[str] = []

    def __call__(self, message: str) -> None:
        self.lines.append(message)


@pytest.fixture
def sink():
    return CollectingSink()


@pytest.fixture
def tokens():
    counter = itertools.count(1)
    return lambda: f"tok{next(counter):05d}"


@pytest.fixture
def clock():
    return lambda: datetime(2024, 5, 17, 10, 30, 0)


@pytest.fixture
def factory(tokens, sink, clock):
    return default_factory(token_generator=tokens, sink=sink, clock=clock)


@pytest.fixture
def orchestrator(factory):
    orchestrator = PaymentOrchestrator(factory)
    yield orchestrator
    orchestrator.close()


class Spy:
    """Gateway family whose collaborators record every call made on them."""

    def __init__(self, name: str, transaction_id: str = "SPY-00000001") -> None:
        self.name = name
        self.transaction_id = transaction_id
        self.calls: list[str] = []
        self.validate_error: Exception | None = None
        self.process_error: Exception | None = None
        self.process_delay = 0.0

    def family(self) -> GatewayFamily:
        spy = self

        class Validator:
            def validate_card(self, card_number):
                spy.calls.append("validate")
                if spy.validate_error is not None:
                    raise spy.validate_error
                return ACCEPTED

        class Processor:
            def process_transaction(self, amount, card_number):
                spy.calls.append("process")
                if spy.process_delay:
                    time.sleep(spy.process_delay)
                if spy.process_error is not None:
                    raise spy.process_error
                return spy.transaction_id

        class Logger:
            def log(self, message):
                spy.calls.append("log")

        return GatewayFamily(
            tag=self.name,
            name=self.name,
            build_validator=Validator,
            build_processor=lambda tokens: Processor(),
            build_logger=lambda sink, clock: Logger(),
        )


@pytest.fixture
def make_spy():
    return Spy
