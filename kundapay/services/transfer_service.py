"""
Transfer creation from a server-side quote.

Amounts submitted by clients are never trusted: the quote is recomputed
with the same calculator the simulator uses, and the transfer is
persisted from that result.
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from kundapay.models.beneficiary import Beneficiary
from kundapay.models.transfer import Transfer, TransferStatus
from kundapay.schemas.transfer import TransferCreateRequest
from kundapay.services.promo_service import record_promo_usage
from kundapay.services.quote_service import TransferQuoteCalculator

logger = logging.getLogger(__name__)


class TermsNotAcceptedError(ValueError):
    """Raised when a transfer is submitted without accepting the terms."""


async def create_transfer(
    db: AsyncSession,
    calculator: TransferQuoteCalculator,
    user_id: uuid.UUID,
    payload: TransferCreateRequest,
) -> Transfer:
    """
    Quote, then persist a pending transfer and its beneficiary.

    Raises TermsNotAcceptedError before any lookup if the terms were not
    accepted, and lets QuoteError subclasses propagate unchanged.
    """
    if not payload.terms_accepted:
        raise TermsNotAcceptedError("You must accept the terms and conditions to continue")

    quote = await calculator.calculate_transfer_details(
        payload.amount,
        payload.direction,
        payload.payment_method,
        payload.receiving_method,
        is_receive_amount=payload.is_receive_amount,
        promo_code=payload.promo_code,
    )

    now = datetime.now(timezone.utc)
    transfer = Transfer(
        user_id=user_id,
        direction=quote.direction,
        payment_method=quote.payment_method,
        receiving_method=quote.receiving_method,
        amount_sent=quote.amount_sent,
        fees=quote.fees,
        amount_received=quote.amount_received,
        sender_currency=quote.sender_currency,
        receiver_currency=quote.receiver_currency,
        exchange_rate=quote.exchange_rate,
        original_fee_percentage=quote.original_fee_percentage,
        effective_fee_percentage=quote.effective_fee_percentage,
        promo_code_id=quote.promo_code_id,
        funds_origin=payload.funds_origin,
        transfer_reason=payload.transfer_reason,
        terms_accepted=True,
        terms_accepted_at=now,
        status=TransferStatus.PENDING,
    )

    beneficiary = Beneficiary(
        transfer_id=transfer.id,
        first_name=payload.beneficiary.first_name,
        last_name=payload.beneficiary.last_name,
        email=payload.beneficiary.email,
    )
    beneficiary.set_payment_details(payload.beneficiary.payment_details())
    transfer.beneficiary = beneficiary

    db.add(transfer)
    if quote.promo_code_id is not None:
        await record_promo_usage(db, quote.promo_code_id)
    await db.flush()

    logger.info(
        "Transfer %s created: %s %s → %s %s (fees %s, promo %s)",
        transfer.reference,
        quote.amount_sent, quote.sender_currency,
        quote.amount_received, quote.receiver_currency,
        quote.fees, quote.promo_code_id,
    )
    return transfer


def cancel_transfer(transfer: Transfer) -> None:
    """Cancel a pending transfer. Raises ValueError from any other status."""
    transfer.transition_to(TransferStatus.CANCELLED)
    logger.info("Transfer %s cancelled by sender", transfer.reference)
