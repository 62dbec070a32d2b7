"""
Hosted checkout endpoint for card, ACH and PayPal transfers.
"""

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from kundapay.api.deps import get_current_user_id
from kundapay.api.transfers import get_owned_transfer
from kundapay.database import get_db
from kundapay.models.transfer import TransferStatus
from kundapay.schemas.payment import CheckoutSessionRequest, CheckoutSessionResponse
from kundapay.services.payment_service import payment_service, requires_checkout

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/checkout-session", response_model=CheckoutSessionResponse)
async def create_checkout_session(
    payload: CheckoutSessionRequest,
    user_id=Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Open a checkout session for a pending transfer.

    The charge is the transfer's ``amount_sent`` in its sender currency.
    Returns 400 for manual payment methods and 409 unless pending.
    """
    transfer = await get_owned_transfer(db, payload.transfer_id, user_id)

    if not requires_checkout(transfer.payment_method):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Payment method {transfer.payment_method} does not use online checkout",
        )

    if transfer.status != TransferStatus.PENDING:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Only pending transfers can be paid",
        )

    recipient_name = transfer.beneficiary.full_name if transfer.beneficiary else ""

    try:
        session = await payment_service.create_checkout_session(
            amount=transfer.amount_sent,
            currency=transfer.sender_currency,
            direction=transfer.direction,
            payment_method=transfer.payment_method,
            recipient_name=recipient_name,
            transfer_reference=transfer.reference,
        )
    except (httpx.HTTPError, RuntimeError) as exc:
        logger.error("Checkout session failed for %s: %s", transfer.reference, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Payment provider unavailable. Please try again.",
        )

    transfer.checkout_session_id = session["session_id"]
    await db.flush()

    return CheckoutSessionResponse(**session)
