"""Domain models for subscriptions and payments."""

from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True)
class SubscriptionPlan:
    """Purchasable subscription plan."""

    name: str
    amount: int
    currency: str
    duration: timedelta


@dataclass(frozen=True)
class PaymentOrder:
    """Order created with the payment processor."""

    order_id: str
    amount: int
    currency: str
    key_id: str
