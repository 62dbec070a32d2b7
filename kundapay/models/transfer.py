"""
Transfer model: a money transfer created from a computed quote.

- KP-prefixed reference (base36 timestamp + 4 random characters)
- Amounts, currencies and fee percentages copied from the quote
- Admin-operated approval: pending -> completed | cancelled | failed
"""

import enum
import random
import string
import time
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    Enum as SAEnum,
    event,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kundapay.database import Base

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class TransferStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Status transition map
# ---------------------------------------------------------------------------

VALID_TRANSITIONS: dict[TransferStatus, set[TransferStatus]] = {
    TransferStatus.PENDING: {
        TransferStatus.COMPLETED,
        TransferStatus.CANCELLED,
        TransferStatus.FAILED,
    },
    TransferStatus.COMPLETED: set(),
    TransferStatus.CANCELLED: set(),
    TransferStatus.FAILED: set(),
}

_BASE36 = string.digits + string.ascii_uppercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------


class Transfer(Base):
    __tablename__ = "transfers"
    __table_args__ = (
        CheckConstraint("amount_sent > 0", name="ck_transfers_amount_sent_positive"),
        CheckConstraint("amount_received > 0", name="ck_transfers_amount_received_positive"),
    )

    # Primary key
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )

    # Reference
    reference: Mapped[str] = mapped_column(
        String(20), unique=True, index=True, nullable=False,
    )

    # Owner (hosted auth user id)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), index=True, nullable=False,
    )

    # Route
    direction: Mapped[str] = mapped_column(String(32), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(32), nullable=False)
    receiving_method: Mapped[str] = mapped_column(String(32), nullable=False)

    # Amounts
    amount_sent: Mapped[Decimal] = mapped_column(
        Numeric(precision=18, scale=2), nullable=False,
    )
    fees: Mapped[Decimal] = mapped_column(
        Numeric(precision=18, scale=2), default=Decimal("0"),
    )
    amount_received: Mapped[Decimal] = mapped_column(
        Numeric(precision=18, scale=2), nullable=False,
    )
    sender_currency: Mapped[str] = mapped_column(String(3), nullable=False)
    receiver_currency: Mapped[str] = mapped_column(String(3), nullable=False)
    exchange_rate: Mapped[Decimal] = mapped_column(
        Numeric(precision=18, scale=8), nullable=False,
    )

    # Fees & promo
    original_fee_percentage: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=10), nullable=False,
    )
    effective_fee_percentage: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=10), nullable=False,
    )
    promo_code_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("promo_codes.id"), nullable=True,
    )

    # Compliance
    funds_origin: Mapped[str] = mapped_column(String(200), nullable=False)
    transfer_reason: Mapped[str] = mapped_column(String(200), nullable=False)
    terms_accepted: Mapped[bool] = mapped_column(Boolean, default=False)
    terms_accepted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Status
    status: Mapped[TransferStatus] = mapped_column(
        SAEnum(
            TransferStatus, name="transferstatus",
            values_callable=lambda e: [m.value for m in e],
        ),
        default=TransferStatus.PENDING,
    )
    validated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Checkout (card / ACH / PayPal)
    checkout_session_id: Mapped[str | None] = mapped_column(String(255))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    beneficiary = relationship(
        "Beneficiary", back_populates="transfer", uselist=False, lazy="selectin",
    )

    # ------------------------------------------------------------------
    # Reference generation
    # ------------------------------------------------------------------

    @staticmethod
    def generate_reference() -> str:
        """Generate a KP reference: base36 millisecond timestamp + 4 random chars."""
        timestamp = _to_base36(int(time.time() * 1000))
        suffix = "".join(random.choices(_BASE36, k=4))
        return f"KP{timestamp}{suffix}"

    # ------------------------------------------------------------------
    # Status transition validation
    # ------------------------------------------------------------------

    @staticmethod
    def is_valid_transition(from_status: TransferStatus, to_status: TransferStatus) -> bool:
        """Check whether a status transition is allowed."""
        allowed = VALID_TRANSITIONS.get(from_status, set())
        return to_status in allowed

    def transition_to(self, new_status: TransferStatus) -> None:
        """
        Transition to *new_status* if the move is valid.

        Raises ValueError if the transition is not allowed. Stamps
        ``validated_at`` since every allowed move closes the transfer.
        """
        if not self.is_valid_transition(self.status, new_status):
            raise ValueError(
                f"Invalid transition: {self.status.value} -> {new_status.value}"
            )
        self.status = new_status
        self.validated_at = datetime.now(timezone.utc)

    def __repr__(self) -> str:
        return (
            f"<Transfer {self.reference} "
            f"{self.amount_sent} {self.sender_currency} "
            f"status={self.status.value if self.status else 'N/A'}>"
        )


# ---------------------------------------------------------------------------
# Auto-set Python-side defaults on construction
# ---------------------------------------------------------------------------


@event.listens_for(Transfer, "init")
def _set_transfer_defaults(target, args, kwargs):
    if "id" not in kwargs:
        target.id = uuid.uuid4()
    if "reference" not in kwargs:
        target.reference = Transfer.generate_reference()
    if "status" not in kwargs:
        target.status = TransferStatus.PENDING
    if "fees" not in kwargs:
        target.fees = Decimal("0")
    if "terms_accepted" not in kwargs:
        target.terms_accepted = False
    if "created_at" not in kwargs:
        target.created_at = datetime.now(timezone.utc)
    if "updated_at" not in kwargs:
        target.updated_at = datetime.now(timezone.utc)
