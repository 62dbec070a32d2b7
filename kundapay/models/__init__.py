"""SQLAlchemy ORM models for KundaPay."""

from kundapay.models.exchange_rate import ExchangeRate
from kundapay.models.transfer_fee import TransferFee
from kundapay.models.promo_code import PromoCode, DiscountType
from kundapay.models.transfer import Transfer, TransferStatus
from kundapay.models.beneficiary import Beneficiary

__all__ = [
    "ExchangeRate",
    "TransferFee",
    "PromoCode", "DiscountType",
    "Transfer", "TransferStatus",
    "Beneficiary",
]
