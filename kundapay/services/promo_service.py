"""
Promo code validation and fee discounting.

A validated promo code yields a ``Discount``: either a percentage off the
fee or a fixed amount converted into an equivalent fee fraction of the
anchor amount. Effective fees never go below zero.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Protocol

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from kundapay.core.exceptions import PromoCodeInvalidError
from kundapay.models.promo_code import DiscountType, PromoCode

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# ---------------------------------------------------------------------------
# Discount variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PercentageDiscount:
    """``value`` percent off the fee percentage (50 halves the fee)."""
    value: Decimal

    def apply_to(self, fee_percentage: Decimal, anchor_amount: Decimal) -> Decimal:
        return max(ZERO, fee_percentage * (1 - self.value / HUNDRED))


@dataclass(frozen=True)
class FixedDiscount:
    """``value`` currency units off, expressed against the anchor amount."""
    value: Decimal

    def apply_to(self, fee_percentage: Decimal, anchor_amount: Decimal) -> Decimal:
        return max(ZERO, fee_percentage - self.value / anchor_amount)


Discount = PercentageDiscount | FixedDiscount


# ---------------------------------------------------------------------------
# Validation result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PromoValidation:
    valid: bool
    message: str
    discount_type: DiscountType | None = None
    discount_value: Decimal | None = None
    promo_code_id: uuid.UUID | None = None

    def discount(self) -> Discount:
        """Build the discount variant for a valid code."""
        if self.discount_type == DiscountType.PERCENTAGE:
            return PercentageDiscount(Decimal(self.discount_value))
        if self.discount_type == DiscountType.FIXED:
            return FixedDiscount(Decimal(self.discount_value))
        raise PromoCodeInvalidError(self.message or "Invalid promo code")


class PromoValidator(Protocol):
    async def validate_promo_code(self, code: str, direction: str) -> PromoValidation:
        ...


# ---------------------------------------------------------------------------
# Database-backed validator
# ---------------------------------------------------------------------------


class DatabasePromoValidator:
    """Validates codes against the ``promo_codes`` table."""

    def __init__(self, db: AsyncSession, clock=None):
        self.db = db
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    async def validate_promo_code(self, code: str, direction: str) -> PromoValidation:
        direction = getattr(direction, "value", direction)
        normalized = (code or "").strip().upper()
        if not normalized:
            return PromoValidation(valid=False, message="Invalid promo code")

        result = await self.db.execute(
            select(PromoCode).where(func.upper(PromoCode.code) == normalized)
        )
        candidates = list(result.scalars().all())
        if not candidates:
            return PromoValidation(valid=False, message="Invalid promo code")

        promo = next((p for p in candidates if p.direction == direction), None)
        if promo is None:
            return PromoValidation(
                valid=False,
                message="This promo code is not valid for this transfer direction",
            )

        now = self.clock()
        if not promo.active:
            return PromoValidation(valid=False, message="This promo code is no longer active")
        if now < promo.start_date:
            return PromoValidation(valid=False, message="This promo code is not yet valid")
        if now > promo.end_date:
            return PromoValidation(valid=False, message="This promo code has expired")
        if promo.is_exhausted():
            return PromoValidation(
                valid=False,
                message="This promo code has reached its maximum number of uses",
            )

        return PromoValidation(
            valid=True,
            message="Promo code applied",
            discount_type=promo.discount_type,
            discount_value=Decimal(promo.discount_value),
            promo_code_id=promo.id,
        )


# ---------------------------------------------------------------------------
# Applying a code
# ---------------------------------------------------------------------------


async def apply_promo_code(
    validator: PromoValidator,
    code: str | None,
    direction: str,
    fee_percentage: Decimal,
    anchor_amount: Decimal,
) -> tuple[Decimal, uuid.UUID | None]:
    """
    Return ``(effective_fee_percentage, promo_code_id)``.

    Without a code the base fee is returned unchanged. An invalid code
    raises PromoCodeInvalidError carrying the validator's message.
    """
    if not code:
        return fee_percentage, None

    validation = await validator.validate_promo_code(code, direction)
    if not validation.valid:
        logger.warning("Promo code %s rejected for %s: %s", code, direction, validation.message)
        raise PromoCodeInvalidError(validation.message or "Invalid promo code")

    effective = validation.discount().apply_to(fee_percentage, anchor_amount)
    return effective, validation.promo_code_id


async def record_promo_usage(db: AsyncSession, promo_code_id: uuid.UUID) -> None:
    """
    Increment ``current_uses`` for a promo code attached to a new transfer.

    The usage cap is re-checked inside the UPDATE. When no row matches,
    the code was exhausted by a concurrent transfer and
    PromoCodeInvalidError is raised.
    """
    result = await db.execute(
        update(PromoCode)
        .where(
            PromoCode.id == promo_code_id,
            or_(
                PromoCode.max_uses.is_(None),
                PromoCode.current_uses < PromoCode.max_uses,
            ),
        )
        .values(current_uses=PromoCode.current_uses + 1)
    )
    if result.rowcount != 1:
        logger.warning("Promo code %s exhausted before usage was recorded", promo_code_id)
        raise PromoCodeInvalidError("This promo code has reached its maximum number of uses")
