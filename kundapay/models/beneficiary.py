"""
Beneficiary model: the recipient attached to a transfer.

Payment details (phone, address, bank details, Alipay id, Wero name)
are stored as a Fernet-encrypted JSON document.
"""

import json
import uuid
from datetime import datetime, timezone

from cryptography.fernet import Fernet, InvalidToken
from sqlalchemy import DateTime, ForeignKey, String, Text, event
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kundapay.config import settings
from kundapay.database import Base

# ---------------------------------------------------------------------------
# Fernet cipher: lazily initialised from settings
# ---------------------------------------------------------------------------

_fernet: Fernet | None = None


def _get_fernet() -> Fernet:
    global _fernet
    if _fernet is None:
        _fernet = Fernet(settings.FERNET_KEY.encode())
    return _fernet


def configure_fernet(key: str | bytes) -> None:
    """Override the Fernet key at runtime (used in tests)."""
    global _fernet
    if isinstance(key, str):
        key = key.encode()
    _fernet = Fernet(key)


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------


class Beneficiary(Base):
    __tablename__ = "beneficiaries"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    transfer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("transfers.id", ondelete="CASCADE"),
        unique=True, nullable=False,
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    payment_details: Mapped[str | None] = mapped_column(Text)  # encrypted JSON

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    transfer = relationship("Transfer", back_populates="beneficiary")

    # ------------------------------------------------------------------
    # Encrypted payment details
    # ------------------------------------------------------------------

    def set_payment_details(self, details: dict) -> None:
        """Encrypt and store the payment details document."""
        plaintext = json.dumps(details, sort_keys=True)
        self.payment_details = _get_fernet().encrypt(plaintext.encode()).decode()

    def get_payment_details(self) -> dict:
        """Decrypt and return the payment details, or {} if unset."""
        if self.payment_details is None:
            return {}
        try:
            plaintext = _get_fernet().decrypt(self.payment_details.encode()).decode()
        except InvalidToken:
            raise ValueError("Failed to decrypt value: invalid key or corrupted data")
        return json.loads(plaintext)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Beneficiary transfer={self.transfer_id} name={self.full_name!r}>"


@event.listens_for(Beneficiary, "init")
def _set_beneficiary_defaults(target, args, kwargs):
    if "id" not in kwargs:
        target.id = uuid.uuid4()
    if "created_at" not in kwargs:
        target.created_at = datetime.now(timezone.utc)
