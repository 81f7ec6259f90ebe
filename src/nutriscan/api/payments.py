"""Subscription checkout endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from nutriscan.api.auth import require_user
from nutriscan.api.dependencies import format_error, get_container
from nutriscan.api.schemas import OrderRequest, PaymentVerificationRequest
from nutriscan.containers import AppContainer
from nutriscan.services.payments import (
    InvalidSignatureError,
    OrderMismatchError,
    PaymentError,
    UnknownPlanError,
)

router = APIRouter(prefix="/payments", tags=["payments"])

_logger = logging.getLogger(__name__)


@router.get("/plans")
async def list_plans(
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """List plans on sale."""
    plans = container.payment_service.plans.values()
    return {
        "plans": [
            {
                "name": plan.name,
                "amount": plan.amount,
                "currency": plan.currency,
                "duration_days": plan.duration.days,
            }
            for plan in plans
        ]
    }


@router.post("/orders", status_code=status.HTTP_201_CREATED)
async def create_order(
    body: OrderRequest,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Create a checkout order for a plan."""
    try:
        order = await container.payment_service.create_order(body.plan_name)
    except UnknownPlanError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    except PaymentError as exc:
        _logger.warning("Order creation failed for user %s", user_id)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=format_error(container, exc, str(exc)),
        ) from exc
    return {
        "order_id": order.order_id,
        "amount": order.amount,
        "currency": order.currency,
        "key_id": order.key_id,
    }


@router.post("/verify")
async def verify_payment(
    body: PaymentVerificationRequest,
    user_id: UUID = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Verify the checkout signature and activate the subscription."""
    try:
        ends_at = await container.payment_service.verify_payment(
            user_id,
            order_id=body.razorpay_order_id,
            payment_id=body.razorpay_payment_id,
            signature=body.razorpay_signature,
            plan_name=body.plan_name,
        )
    except (InvalidSignatureError, OrderMismatchError, UnknownPlanError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    except PaymentError as exc:
        _logger.warning("Payment verification failed for user %s", user_id)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=format_error(container, exc, str(exc)),
        ) from exc
    return {"is_subscribed": True, "subscription_ends_at": ends_at.isoformat()}
