"""
Pydantic schemas for transfer quotes.
"""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from kundapay.core.corridors import PaymentMethod, ReceivingMethod


class QuoteRequest(BaseModel):
    """Amount typed by the user plus the chosen route and methods."""
    amount: Decimal = Field(..., examples=[100])
    direction: str = Field(..., examples=["FRANCE_TO_GABON"])
    payment_method: PaymentMethod = Field(..., examples=["BANK_TRANSFER"])
    receiving_method: ReceivingMethod = Field(..., examples=["AIRTEL_MONEY"])
    is_receive_amount: bool = False
    promo_code: str | None = Field(None, max_length=32, examples=["BIENVENUE"])


class QuoteResponse(BaseModel):
    """Both sides of the transfer, fees and the rates used."""
    amount_sent: Decimal
    fees: Decimal
    amount_received: Decimal
    sender_currency: str
    receiver_currency: str
    exchange_rate: Decimal
    direction: str
    payment_method: str
    receiving_method: str
    promo_code_id: UUID | None
    original_fee_percentage: Decimal
    effective_fee_percentage: Decimal
