"""
Promo code model: fee discounts issued for a single transfer direction.

A code applies only to the direction it was issued for, only while
active and inside its validity window, and only while under its usage
cap (``max_uses`` of None means unlimited).
"""

import enum
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    Enum as SAEnum,
    event,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from kundapay.database import Base


class DiscountType(str, enum.Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"


class PromoCode(Base):
    __tablename__ = "promo_codes"
    __table_args__ = (
        UniqueConstraint("code", "direction", name="uq_promo_codes_code_direction"),
        CheckConstraint("discount_value > 0", name="ck_promo_codes_value_positive"),
        CheckConstraint("current_uses >= 0", name="ck_promo_codes_uses_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    code: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    direction: Mapped[str] = mapped_column(String(32), nullable=False)

    discount_type: Mapped[DiscountType] = mapped_column(
        SAEnum(DiscountType, name="discounttype"), nullable=False,
    )
    discount_value: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2), nullable=False,
    )

    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    max_uses: Mapped[int | None] = mapped_column(Integer, nullable=True)
    current_uses: Mapped[int] = mapped_column(Integer, default=0)
    active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    # ------------------------------------------------------------------
    # Applicability
    # ------------------------------------------------------------------

    def is_within_window(self, now: datetime) -> bool:
        return self.start_date <= now <= self.end_date

    def is_exhausted(self) -> bool:
        """True once the usage cap has been reached."""
        if self.max_uses is None:
            return False
        return self.current_uses >= self.max_uses

    def is_active_at(self, now: datetime) -> bool:
        """Active flag set, inside the window, and under the usage cap."""
        return self.active and self.is_within_window(now) and not self.is_exhausted()

    def __repr__(self) -> str:
        return (
            f"<PromoCode {self.code} {self.direction} "
            f"{self.discount_type.value if self.discount_type else 'N/A'} "
            f"{self.discount_value}>"
        )


@event.listens_for(PromoCode, "init")
def _set_promo_defaults(target, args, kwargs):
    if "id" not in kwargs:
        target.id = uuid.uuid4()
    if "current_uses" not in kwargs:
        target.current_uses = 0
    if "active" not in kwargs:
        target.active = True
    if "created_at" not in kwargs:
        target.created_at = datetime.now(timezone.utc)
