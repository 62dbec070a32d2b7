"""
Transfer fee model: fee percentage per route and method combination.

Keyed by (from_country, to_country, payment_method, receiving_method).
``fee_percentage`` is a fraction: 0.005 means 0.5 %.
"""

import uuid
from decimal import Decimal

from sqlalchemy import CheckConstraint, Numeric, String, UniqueConstraint, event
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from kundapay.database import Base


class TransferFee(Base):
    __tablename__ = "transfer_fees"
    __table_args__ = (
        UniqueConstraint(
            "from_country", "to_country", "payment_method", "receiving_method",
            name="uq_transfer_fees_route_methods",
        ),
        CheckConstraint(
            "fee_percentage >= 0 AND fee_percentage < 1",
            name="ck_transfer_fees_fraction",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    from_country: Mapped[str] = mapped_column(String(2), nullable=False)
    to_country: Mapped[str] = mapped_column(String(2), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(32), nullable=False)
    receiving_method: Mapped[str] = mapped_column(String(32), nullable=False)
    fee_percentage: Mapped[Decimal] = mapped_column(
        Numeric(precision=6, scale=5), nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<TransferFee {self.from_country}->{self.to_country} "
            f"{self.payment_method}/{self.receiving_method} {self.fee_percentage}>"
        )


@event.listens_for(TransferFee, "init")
def _set_fee_defaults(target, args, kwargs):
    if "id" not in kwargs:
        target.id = uuid.uuid4()
