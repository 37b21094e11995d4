"""Error taxonomy for payment dispatch.

Card rejection is not here: it is an expected outcome returned as a value.
"""


class PaymentError(Exception):
    """Base class for every fault raised by the payment core."""


class InvalidPaymentRequest(PaymentError, ValueError):
    """Amount or card number violates the request invariants."""


class UnknownGateway(PaymentError, LookupError):
    """No gateway family is registered under the requested tag."""

    def __init__(self, gateway: str) -> None:
        super().__init__(f"unknown gateway: {gateway!r}")
        self.gateway = gateway


class GatewayAlreadyRegistered(PaymentError):
    def __init__(self, gateway: str) -> None:
        super().__init__(f"gateway already registered: {gateway!r}")
        self.gateway = gateway


class GatewayMisconfigured(PaymentError):
    """A gateway family failed to build its collaborator set."""

    def __init__(self, gateway: str, detail: str) -> None:
        super().__init__(f"gateway {gateway!r} could not be assembled: {detail}")
        self.gateway = gateway


class ProcessorFailure(PaymentError):
    """The transaction processor raised while handling a validated card."""

    def __init__(self, gateway: str, detail: str) -> None:
        super().__init__(f"processor failure on {gateway!r}: {detail}")
        self.gateway = gateway


class ProcessorTimeout(ProcessorFailure):
    def __init__(self, gateway: str, timeout: float) -> None:
        super().__init__(gateway, f"no result within {timeout}s")
        self.timeout = timeout


class ValidatorFailure(PaymentError):
    """The card validator raised instead of returning a verdict."""

    def __init__(self, gateway: str, detail: str) -> None:
        super().__init__(f"validator failure on {gateway!r}: {detail}")
        self.gateway = gateway
