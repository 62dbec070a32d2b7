"""
Pydantic schemas for promo code validation.
"""

from decimal import Decimal

from pydantic import BaseModel, Field


class PromoValidationRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=32, examples=["BIENVENUE"])
    direction: str = Field(..., examples=["FRANCE_TO_GABON"])


class PromoValidationResponse(BaseModel):
    valid: bool
    message: str
    discount_type: str | None = None
    discount_value: Decimal | None = None
