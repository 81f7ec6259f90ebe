"""Subscription checkout and payment verification."""

import hashlib
import hmac
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from nutriscan.domain.payments import PaymentOrder, SubscriptionPlan
from nutriscan.services.profiles import ProfileRepository

DEFAULT_PLANS: dict[str, SubscriptionPlan] = {
    "Premium": SubscriptionPlan(
        name="Premium", amount=260, currency="INR", duration=timedelta(days=30)
    ),
    "Trial": SubscriptionPlan(
        name="Trial", amount=1, currency="INR", duration=timedelta(days=2)
    ),
}

_logger = logging.getLogger(__name__)


class PaymentClient(Protocol):
    """Interface for the payment processor's order API."""

    async def create_order(
        self,
        amount_minor: int,
        currency: str,
        receipt: str,
        notes: dict[str, str],
    ) -> dict[str, object]:
        """Create an order and return the raw API data."""

    async def fetch_order(self, order_id: str) -> dict[str, object]:
        """Return the raw API data for an existing order."""


class PaymentError(Exception):
    """Raised when the payment processor call fails."""


class InvalidSignatureError(PaymentError):
    """Raised when a payment signature does not match."""


class UnknownPlanError(PaymentError):
    """Raised for plan names that are not on sale."""


class OrderMismatchError(PaymentError):
    """Raised when a paid order does not belong to the requested plan."""


@dataclass
class PaymentService:
    """Creates orders and activates subscriptions after payment."""

    client: PaymentClient
    profile_repository: ProfileRepository
    key_id: str
    key_secret: str
    plans: dict[str, SubscriptionPlan] = field(
        default_factory=lambda: dict(DEFAULT_PLANS)
    )

    def get_plan(self, plan_name: str) -> SubscriptionPlan:
        """Return a plan by name."""
        plan = self.plans.get(plan_name)
        if plan is None:
            raise UnknownPlanError(f"Unknown plan: {plan_name}")
        return plan

    async def create_order(self, plan_name: str) -> PaymentOrder:
        """Create a processor order for a plan."""
        plan = self.get_plan(plan_name)
        now = datetime.now(tz=UTC)
        try:
            payload = await self.client.create_order(
                amount_minor=plan.amount * 100,
                currency=plan.currency,
                receipt=f"receipt_{int(now.timestamp() * 1000)}",
                notes={"plan": plan.name},
            )
        except Exception as exc:
            _logger.warning("Order creation failed for plan %s: %s", plan.name, exc)
            raise PaymentError("Failed to create payment order") from exc
        return PaymentOrder(
            order_id=str(payload["id"]),
            amount=int(payload.get("amount", plan.amount * 100)),
            currency=str(payload.get("currency", plan.currency)),
            key_id=self.key_id,
        )

    async def verify_payment(  # noqa: PLR0913
        self,
        user_id: UUID,
        order_id: str,
        payment_id: str,
        signature: str,
        plan_name: str,
    ) -> datetime:
        """Check the payment signature and activate the subscription.

        The plan is read from the paid order and must match plan_name.
        """
        requested = self.get_plan(plan_name)
        if not is_valid_signature(self.key_secret, order_id, payment_id, signature):
            raise InvalidSignatureError("Invalid payment signature")
        try:
            order = await self.client.fetch_order(order_id)
        except Exception as exc:
            _logger.warning("Order lookup failed for %s: %s", order_id, exc)
            raise PaymentError("Failed to load payment order") from exc
        plan = self._plan_for_order(order)
        if plan != requested:
            _logger.warning(
                "Order %s is for %s, not %s", order_id, plan.name, requested.name
            )
            raise OrderMismatchError("Payment does not match the selected plan")
        ends_at = datetime.now(tz=UTC) + plan.duration
        self.profile_repository.update_profile(
            user_id,
            {
                "is_subscribed": True,
                "subscription_ends_at": ends_at.isoformat(),
            },
        )
        _logger.info("Activated %s subscription for user %s", plan.name, user_id)
        return ends_at

    def _plan_for_order(self, order: dict[str, object]) -> SubscriptionPlan:
        notes = order.get("notes")
        plan_name = notes.get("plan") if isinstance(notes, dict) else None
        plan = self.plans.get(str(plan_name))
        if (
            plan is None
            or order.get("amount") != plan.amount * 100
            or order.get("currency") != plan.currency
        ):
            raise OrderMismatchError("Payment does not match the selected plan")
        return plan


def payment_signature(key_secret: str, order_id: str, payment_id: str) -> str:
    """Return the hex HMAC-SHA256 of "<order_id>|<payment_id>"."""
    body = f"{order_id}|{payment_id}".encode()
    return hmac.new(key_secret.encode(), body, hashlib.sha256).hexdigest()


def is_valid_signature(
    key_secret: str, order_id: str, payment_id: str, signature: str
) -> bool:
    """Compare a payment signature in constant time."""
    expected = payment_signature(key_secret, order_id, payment_id)
    return hmac.compare_digest(expected, signature)
