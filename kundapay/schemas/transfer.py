"""
Pydantic schemas for transfer creation, listing, and cancellation.
"""

import re
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from kundapay.core.corridors import PaymentMethod, ReceivingMethod


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


class BeneficiaryData(BaseModel):
    """Recipient identity and method-specific payment details."""
    first_name: str = Field(..., min_length=1, max_length=100, examples=["Marie"])
    last_name: str = Field(..., min_length=1, max_length=100, examples=["Nze"])
    email: str = Field(..., max_length=255, examples=["marie.nze@example.com"])
    phone: str | None = Field(None, max_length=20, examples=["+24174036033"])
    address: str | None = Field(None, max_length=300)
    bank_details: dict | None = None
    alipay_id: str | None = Field(None, max_length=100)
    wero_name: str | None = Field(None, max_length=100)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        if not re.match(r"^[^@\s]+@[^@\s]+\.[^@\s]+$", v):
            raise ValueError("Invalid email address")
        return v.strip().lower()

    def payment_details(self) -> dict:
        return {
            "phone": self.phone,
            "address": self.address,
            "bankDetails": self.bank_details,
            "alipayId": self.alipay_id,
            "weroName": self.wero_name,
        }


class TransferCreateRequest(BaseModel):
    """Schema for creating a transfer; amounts are re-quoted server-side."""
    amount: Decimal = Field(..., gt=0, examples=[100])
    direction: str = Field(..., examples=["FRANCE_TO_GABON"])
    payment_method: PaymentMethod = Field(..., examples=["BANK_TRANSFER"])
    receiving_method: ReceivingMethod = Field(..., examples=["AIRTEL_MONEY"])
    is_receive_amount: bool = False
    promo_code: str | None = Field(None, max_length=32)
    beneficiary: BeneficiaryData
    funds_origin: str = Field(..., min_length=1, max_length=200, examples=["Salary"])
    transfer_reason: str = Field(..., min_length=1, max_length=200, examples=["Family support"])
    terms_accepted: bool = False


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class BeneficiaryResponse(BaseModel):
    first_name: str
    last_name: str
    email: str


class TransferResponse(BaseModel):
    """Full transfer response with optional manual payment instructions."""
    id: UUID
    reference: str
    user_id: UUID
    direction: str
    payment_method: str
    receiving_method: str
    amount_sent: Decimal
    fees: Decimal
    amount_received: Decimal
    sender_currency: str
    receiver_currency: str
    exchange_rate: Decimal
    original_fee_percentage: Decimal
    effective_fee_percentage: Decimal
    promo_code_id: UUID | None
    status: str
    requires_checkout: bool
    validated_at: datetime | None
    created_at: datetime
    beneficiary: BeneficiaryResponse | None = None
    payment_instructions: str | None = None


class TransferListResponse(BaseModel):
    """Paginated transfer list."""
    items: list[TransferResponse]
    total: int
    page: int
    per_page: int
