"""
Transfer quote endpoint.

Public: the simulator quotes before the user has signed in. The
response carries both amounts, the fees, and the base and effective fee
percentages so the caller can show the promo saving.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from kundapay.api.deps import get_calculator
from kundapay.core.exceptions import FeeUnavailableError, QuoteError, RateUnavailableError
from kundapay.schemas.quote import QuoteRequest, QuoteResponse
from kundapay.services.quote_service import TransferQuoteCalculator

logger = logging.getLogger(__name__)

router = APIRouter()


def quote_error_to_http(exc: QuoteError) -> HTTPException:
    """Map a calculation failure to the HTTP error returned to clients."""
    if isinstance(exc, (RateUnavailableError, FeeUnavailableError)):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.message,
        )
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=exc.message,
    )


@router.post("/", response_model=QuoteResponse)
async def create_quote(
    payload: QuoteRequest,
    calculator: TransferQuoteCalculator = Depends(get_calculator),
):
    """
    Quote a transfer from either side.

    ``is_receive_amount`` selects which side ``amount`` is on. Invalid
    amounts, unknown directions, rejected promo codes and exceeded
    ceilings return 400; routes with no configured rate or fee return 422.
    """
    try:
        quote = await calculator.calculate_transfer_details(
            payload.amount,
            payload.direction,
            payload.payment_method,
            payload.receiving_method,
            is_receive_amount=payload.is_receive_amount,
            promo_code=payload.promo_code,
        )
    except QuoteError as exc:
        logger.info("Quote rejected for %s: %s", payload.direction, exc.message)
        raise quote_error_to_http(exc)

    return QuoteResponse(**quote.to_dict())
