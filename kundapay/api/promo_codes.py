"""
Promo code validation endpoint.

Lets the transfer form check a code before quoting. Rejections are
returned as ``valid: false`` with a message, not as HTTP errors.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from kundapay.core.corridors import resolve_corridor
from kundapay.core.exceptions import InvalidDirectionError
from kundapay.database import get_db
from kundapay.schemas.promo import PromoValidationRequest, PromoValidationResponse
from kundapay.services.promo_service import DatabasePromoValidator

router = APIRouter()


@router.post("/validate", response_model=PromoValidationResponse)
async def validate_promo_code(
    payload: PromoValidationRequest,
    db: AsyncSession = Depends(get_db),
):
    """Check a promo code for a direction without recording a use."""
    try:
        corridor = resolve_corridor(payload.direction)
    except InvalidDirectionError as exc:
        return PromoValidationResponse(valid=False, message=exc.message)

    validation = await DatabasePromoValidator(db).validate_promo_code(
        payload.code, corridor.direction.value,
    )
    return PromoValidationResponse(
        valid=validation.valid,
        message=validation.message,
        discount_type=validation.discount_type.value if validation.discount_type else None,
        discount_value=validation.discount_value,
    )
