"""Gateway family registry and the collaborator-set factory."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from paygate.common.errors import GatewayAlreadyRegistered, GatewayMisconfigured, UnknownGateway
from paygate.gateways.base import (
    CardValidator,
    Clock,
    CollaboratorSet,
    Gateway,
    LogSink,
    TokenGenerator,
    TransactionLogger,
    TransactionProcessor,
    gateway_tag,
)
from paygate.gateways.sinks import LoggingSink


@dataclass(frozen=True)
class GatewayFamily:
    """Builders for one vendor's matched collaborators."""

    tag: str
    name: str
    build_validator: Callable[[], CardValidator]
    build_processor: Callable[[TokenGenerator], TransactionProcessor]
    build_logger: Callable[[LogSink, Clock], TransactionLogger]


class GatewayFactory:
    """Maps gateway tags to families and assembles a fresh set per attempt.

    Families are registered during setup; afterwards the factory is only read,
    so one instance can serve concurrent requests without locking.
    """

    def __init__(
        self,
        token_generator: TokenGenerator | None = None,
        sink: LogSink | None = None,
        clock: Clock = datetime.now,
    ) -> None:
        if token_generator is None:
            from paygate.gateways.families import random_token

            token_generator = random_token
        self.token_generator = token_generator
        self.sink = sink if sink is not None else LoggingSink()
        self.clock = clock
        self._families: dict[str, GatewayFamily] = {}

    def register(self, family: GatewayFamily) -> "GatewayFactory":
        tag = gateway_tag(family.tag)
        if tag in self._families:
            raise GatewayAlreadyRegistered(tag)
        self._families[tag] = family
        return self

    def __contains__(self, gateway: Gateway | str) -> bool:
        return gateway_tag(gateway) in self._families

    def gateways(self) -> list[str]:
        return sorted(self._families)

    def family(self, gateway: Gateway | str) -> GatewayFamily:
        tag = gateway_tag(gateway)
        try:
            return self._families[tag]
        except KeyError:
            raise UnknownGateway(tag) from None

    def create(self, gateway: Gateway | str) -> CollaboratorSet:
        """Build all three collaborators of one family, or none of them."""

        family = self.family(gateway)
        tag = gateway_tag(family.tag)
        try:
            validator = family.build_validator()
            processor = family.build_processor(self.token_generator)
            transaction_logger = family.build_logger(self.sink, self.clock)
        except Exception as exc:
            raise GatewayMisconfigured(tag, str(exc)) from exc
        if validator is None or processor is None or transaction_logger is None:
            raise GatewayMisconfigured(tag, "builder returned no collaborator")
        return CollaboratorSet(
            gateway=tag,
            validator=validator,
            processor=processor,
            logger=transaction_logger,
        )


def default_factory(
    token_generator: TokenGenerator | None = None,
    sink: LogSink | None = None,
    clock: Clock = datetime.now,
) -> GatewayFactory:
    """Factory with the PagSeguro, MercadoPago and Stripe families registered."""

    from paygate.gateways.families import BUILTIN_FAMILIES

    factory = GatewayFactory(token_generator=token_generator, sink=sink, clock=clock)
    for family in BUILTIN_FAMILIES:
        factory.register(family)
    return factory
