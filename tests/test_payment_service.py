"""Tests for subscription payments."""

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from nutriscan.services.payments import (
    InvalidSignatureError,
    OrderMismatchError,
    PaymentError,
    PaymentService,
    UnknownPlanError,
    is_valid_signature,
    payment_signature,
)
from tests.conftest import USER_ID, FakePaymentClient, InMemoryProfileRepository


def _service(
    client: FakePaymentClient, repository: InMemoryProfileRepository
) -> PaymentService:
    return PaymentService(
        client=client,
        profile_repository=repository,
        key_id="rzp_test_key",
        key_secret="secret",
    )


def test_create_order_uses_minor_units(
    payment_client: FakePaymentClient,
    profile_repository: InMemoryProfileRepository,
) -> None:
    order = asyncio.run(
        _service(payment_client, profile_repository).create_order("Premium")
    )

    assert order.order_id == "order_1"
    assert order.amount == 26000
    assert order.currency == "INR"
    assert order.key_id == "rzp_test_key"
    sent = payment_client.orders[0]
    assert sent["notes"] == {"plan": "Premium"}
    assert str(sent["receipt"]).startswith("receipt_")


def test_create_order_unknown_plan(
    payment_client: FakePaymentClient,
    profile_repository: InMemoryProfileRepository,
) -> None:
    with pytest.raises(UnknownPlanError):
        asyncio.run(_service(payment_client, profile_repository).create_order("Gold"))
    assert payment_client.orders == []


def test_create_order_wraps_client_errors(
    profile_repository: InMemoryProfileRepository,
) -> None:
    client = FakePaymentClient(error=RuntimeError("timeout"))

    with pytest.raises(PaymentError, match="Failed to create"):
        asyncio.run(_service(client, profile_repository).create_order("Trial"))


def test_signature_helpers() -> None:
    signature = payment_signature("secret", "order_1", "pay_1")

    assert len(signature) == 64
    assert is_valid_signature("secret", "order_1", "pay_1", signature)
    assert not is_valid_signature("secret", "order_1", "pay_2", signature)
    assert not is_valid_signature("other", "order_1", "pay_1", signature)


def _pay(service: PaymentService, plan_name: str) -> tuple[str, str]:
    order = asyncio.run(service.create_order(plan_name))
    return order.order_id, payment_signature("secret", order.order_id, "pay_1")


def test_verify_payment_activates_subscription(
    payment_client: FakePaymentClient,
    profile_repository: InMemoryProfileRepository,
) -> None:
    service = _service(payment_client, profile_repository)
    order_id, signature = _pay(service, "Trial")
    before = datetime.now(tz=UTC)

    ends_at = asyncio.run(
        service.verify_payment(
            USER_ID,
            order_id=order_id,
            payment_id="pay_1",
            signature=signature,
            plan_name="Trial",
        )
    )

    assert before + timedelta(days=2) <= ends_at < before + timedelta(days=3)
    profile = profile_repository.profiles[USER_ID]
    assert profile.is_subscribed
    assert profile.subscription_ends_at == ends_at


def test_verify_payment_rejects_bad_signature(
    payment_client: FakePaymentClient,
    profile_repository: InMemoryProfileRepository,
) -> None:
    service = _service(payment_client, profile_repository)
    order_id, _ = _pay(service, "Premium")

    with pytest.raises(InvalidSignatureError):
        asyncio.run(
            service.verify_payment(
                USER_ID,
                order_id=order_id,
                payment_id="pay_1",
                signature="0" * 64,
                plan_name="Premium",
            )
        )
    assert profile_repository.updates == []


def test_verify_payment_uses_plan_of_paid_order(
    payment_client: FakePaymentClient,
    profile_repository: InMemoryProfileRepository,
) -> None:
    service = _service(payment_client, profile_repository)
    order_id, signature = _pay(service, "Trial")

    with pytest.raises(OrderMismatchError):
        asyncio.run(
            service.verify_payment(
                USER_ID,
                order_id=order_id,
                payment_id="pay_1",
                signature=signature,
                plan_name="Premium",
            )
        )
    assert profile_repository.updates == []
    assert not profile_repository.profiles[USER_ID].is_subscribed


def test_verify_payment_rejects_order_with_wrong_amount(
    payment_client: FakePaymentClient,
    profile_repository: InMemoryProfileRepository,
) -> None:
    service = _service(payment_client, profile_repository)
    order_id, signature = _pay(service, "Premium")
    payment_client.orders[0]["amount"] = 100

    with pytest.raises(OrderMismatchError):
        asyncio.run(
            service.verify_payment(
                USER_ID,
                order_id=order_id,
                payment_id="pay_1",
                signature=signature,
                plan_name="Premium",
            )
        )
    assert profile_repository.updates == []


def test_verify_payment_wraps_order_lookup_errors(
    payment_client: FakePaymentClient,
    profile_repository: InMemoryProfileRepository,
) -> None:
    service = _service(payment_client, profile_repository)
    order_id, signature = _pay(service, "Premium")
    payment_client.error = RuntimeError("timeout")

    with pytest.raises(PaymentError, match="Failed to load"):
        asyncio.run(
            service.verify_payment(
                USER_ID,
                order_id=order_id,
                payment_id="pay_1",
                signature=signature,
                plan_name="Premium",
            )
        )
    assert profile_repository.updates == []
