"""
Transfer endpoints: create, list, get, and cancel transfers.

Create flow:
  1. Require accepted terms
  2. Re-quote server-side (client amounts are not trusted)
  3. Persist transfer (PENDING) with its encrypted beneficiary
  4. Record promo code usage
  5. Return details + manual payment instructions or checkout flag
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from kundapay.api.deps import get_calculator, get_current_user_id
from kundapay.api.quotes import quote_error_to_http
from kundapay.core.exceptions import QuoteError
from kundapay.database import get_db
from kundapay.models.transfer import Transfer, TransferStatus
from kundapay.schemas.transfer import (
    BeneficiaryResponse,
    TransferCreateRequest,
    TransferListResponse,
    TransferResponse,
)
from kundapay.services.payment_service import payment_instructions, requires_checkout
from kundapay.services.quote_service import TransferQuoteCalculator
from kundapay.services.transfer_service import (
    TermsNotAcceptedError,
    cancel_transfer,
    create_transfer,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _build_response(transfer: Transfer, with_instructions: bool = False) -> TransferResponse:
    """Build a TransferResponse from an ORM Transfer object."""
    status_val = transfer.status
    if isinstance(status_val, TransferStatus):
        status_val = status_val.value

    beneficiary = None
    if transfer.beneficiary is not None:
        beneficiary = BeneficiaryResponse(
            first_name=transfer.beneficiary.first_name,
            last_name=transfer.beneficiary.last_name,
            email=transfer.beneficiary.email,
        )

    return TransferResponse(
        id=transfer.id,
        reference=transfer.reference,
        user_id=transfer.user_id,
        direction=transfer.direction,
        payment_method=transfer.payment_method,
        receiving_method=transfer.receiving_method,
        amount_sent=transfer.amount_sent,
        fees=transfer.fees,
        amount_received=transfer.amount_received,
        sender_currency=transfer.sender_currency,
        receiver_currency=transfer.receiver_currency,
        exchange_rate=transfer.exchange_rate,
        original_fee_percentage=transfer.original_fee_percentage,
        effective_fee_percentage=transfer.effective_fee_percentage,
        promo_code_id=transfer.promo_code_id,
        status=status_val,
        requires_checkout=requires_checkout(transfer.payment_method),
        validated_at=transfer.validated_at,
        created_at=transfer.created_at,
        beneficiary=beneficiary,
        payment_instructions=(
            payment_instructions(transfer.payment_method) if with_instructions else None
        ),
    )


async def get_owned_transfer(
    db: AsyncSession, transfer_id: UUID, user_id: UUID,
) -> Transfer:
    """Load a transfer or raise 404, then 403 if it belongs to someone else."""
    result = await db.execute(
        select(Transfer).where(Transfer.id == transfer_id)
    )
    transfer = result.scalar_one_or_none()

    if transfer is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Transfer not found",
        )

    if transfer.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this transfer",
        )

    return transfer


# ---------------------------------------------------------------------------
# POST /: Create transfer
# ---------------------------------------------------------------------------


@router.post("/", response_model=TransferResponse, status_code=status.HTTP_201_CREATED)
async def create_transfer_endpoint(
    payload: TransferCreateRequest,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    calculator: TransferQuoteCalculator = Depends(get_calculator),
):
    """Create a pending transfer from a fresh server-side quote."""
    try:
        transfer = await create_transfer(db, calculator, user_id, payload)
    except TermsNotAcceptedError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        )
    except QuoteError as exc:
        raise quote_error_to_http(exc)

    return _build_response(transfer, with_instructions=True)


# ---------------------------------------------------------------------------
# GET /{id}: Get transfer
# ---------------------------------------------------------------------------


@router.get("/{transfer_id}", response_model=TransferResponse)
async def get_transfer(
    transfer_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Get details of a specific transfer. Must be the owner."""
    transfer = await get_owned_transfer(db, transfer_id, user_id)
    return _build_response(transfer, with_instructions=True)


# ---------------------------------------------------------------------------
# GET /: List transfers
# ---------------------------------------------------------------------------


@router.get("/", response_model=TransferListResponse)
async def list_transfers(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    status_filter: TransferStatus | None = Query(None, alias="status"),
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """List the authenticated user's transfers, newest first."""
    filters = [Transfer.user_id == user_id]
    if status_filter:
        filters.append(Transfer.status == status_filter)

    count_stmt = select(func.count(Transfer.id)).where(*filters)
    total = (await db.execute(count_stmt)).scalar_one()

    items_stmt = (
        select(Transfer)
        .where(*filters)
        .order_by(Transfer.created_at.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    result = await db.execute(items_stmt)
    items = list(result.scalars().all())

    return TransferListResponse(
        items=[_build_response(t) for t in items],
        total=total,
        page=page,
        per_page=per_page,
    )


# ---------------------------------------------------------------------------
# POST /{id}/cancel: Cancel transfer
# ---------------------------------------------------------------------------


@router.post("/{transfer_id}/cancel", response_model=TransferResponse)
async def cancel_transfer_endpoint(
    transfer_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a transfer. Only allowed while it is still pending."""
    transfer = await get_owned_transfer(db, transfer_id, user_id)

    try:
        cancel_transfer(transfer)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=(
                f"Cannot cancel transfer in '{transfer.status.value}' status. "
                f"Only pending transfers can be cancelled."
            ),
        )

    await db.flush()
    return _build_response(transfer)
