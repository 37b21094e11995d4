"""Collaborator-set factory: totality, atomic assembly and extension."""

import pytest

from paygate.common.errors import GatewayAlreadyRegistered, GatewayMisconfigured, UnknownGateway
from paygate.gateways.base import (
    CardValidator,
    Gateway,
    TransactionLogger,
    TransactionProcessor,
)
from paygate.gateways.families import PAGSEGURO, vendor_family
from paygate.gateways.registry import GatewayFactory, GatewayFamily


def test_every_builtin_gateway_yields_complete_set(factory):
    assert factory.gateways() == ["mercadopago", "pagseguro", "stripe"]

    for gateway in Gateway:
        collaborators = factory.create(gateway)
        assert collaborators.gateway == gateway.value
        assert isinstance(collaborators.validator, CardValidator)
        assert isinstance(collaborators.processor, TransactionProcessor)
        assert isinstance(collaborators.logger, TransactionLogger)


def test_collaborators_belong_to_one_family(factory):
    collaborators = factory.create("mercadopago")

    assert collaborators.validator.name == "MercadoPago"
    assert collaborators.processor.name == "MercadoPago"
    assert collaborators.logger.name == "MercadoPago"


def test_each_create_returns_fresh_set(factory):
    first = factory.create(Gateway.STRIPE)
    second = factory.create(Gateway.STRIPE)

    assert first is not second
    assert first.processor is not second.processor


def test_string_tags_are_normalized(factory):
    assert "STRIPE" in factory
    assert factory.create(" Stripe ").gateway == "stripe"


def test_unknown_gateway_is_loud(factory):
    assert "cielo" not in factory
    with pytest.raises(UnknownGateway) as err:
        factory.create("cielo")
    assert err.value.gateway == "cielo"


def test_duplicate_registration_rejected(factory):
    with pytest.raises(GatewayAlreadyRegistered):
        factory.register(PAGSEGURO)


def test_failed_builder_produces_no_partial_set(sink):
    def explode(tokens):
        raise RuntimeError("missing credentials")

    broken = GatewayFamily(
        tag="broken",
        name="Broken",
        build_validator=PAGSEGURO.build_validator,
        build_processor=explode,
        build_logger=PAGSEGURO.build_logger,
    )
    factory = GatewayFactory(sink=sink).register(broken)

    with pytest.raises(GatewayMisconfigured, match="missing credentials"):
        factory.create("broken")


def test_builder_returning_none_is_misconfigured(sink):
    hollow = GatewayFamily(
        tag="hollow",
        name="Hollow",
        build_validator=lambda: None,
        build_processor=PAGSEGURO.build_processor,
        build_logger=PAGSEGURO.build_logger,
    )
    factory = GatewayFactory(sink=sink).register(hollow)

    with pytest.raises(GatewayMisconfigured):
        factory.create("hollow")


def test_new_family_registers_without_touching_builtins(factory):
    factory.register(vendor_family("cielo", "Cielo", "CIELO", "R$", card_prefix="6"))

    collaborators = factory.create("cielo")

    assert collaborators.validator.validate_card("6234567890123456")
    assert not collaborators.validator.validate_card("4234567890123456")
