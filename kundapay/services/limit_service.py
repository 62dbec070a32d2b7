"""
Corridor transfer ceilings.

Each limit targets one country on one side of a transfer: ORIGIN limits
are checked against the amount sent, DESTINATION limits against the
amount received. Both run on final, rounded, post-discount amounts, so
the anchor side the user typed on makes no difference.
"""

import enum
from dataclasses import dataclass
from decimal import Decimal

from kundapay.config import settings
from kundapay.core.corridors import Corridor, CountryCode
from kundapay.core.exceptions import TransferLimitExceededError


class LimitSide(str, enum.Enum):
    ORIGIN = "origin"
    DESTINATION = "destination"


@dataclass(frozen=True)
class TransferLimit:
    country: CountryCode
    side: LimitSide
    ceiling: Decimal
    currency: str
    description: str

    def applies_to(self, corridor: Corridor) -> bool:
        if self.side == LimitSide.ORIGIN:
            return corridor.origin_country == self.country
        return corridor.destination_country == self.country


def _fcfa(amount: Decimal) -> str:
    return f"{int(amount):,} FCFA".replace(",", " ")


def default_limits() -> list[TransferLimit]:
    """Ceilings configured through settings."""
    outbound = settings.GABON_OUTBOUND_LIMIT_XAF
    inbound = settings.GABON_INBOUND_LIMIT_XAF
    return [
        TransferLimit(
            country=CountryCode.GA,
            side=LimitSide.ORIGIN,
            ceiling=outbound,
            currency="XAF",
            description=f"transfers from Gabon are limited to {_fcfa(outbound)}",
        ),
        TransferLimit(
            country=CountryCode.GA,
            side=LimitSide.DESTINATION,
            ceiling=inbound,
            currency="XAF",
            description=f"transfers to Gabon are limited to {_fcfa(inbound)}",
        ),
    ]


async def check_transfer_limits(
    limits: list[TransferLimit],
    corridor: Corridor,
    amount_sent: Decimal,
    amount_received: Decimal,
    rates,
) -> None:
    """
    Raise TransferLimitExceededError if any applicable ceiling is exceeded.

    An amount in a currency other than the ceiling's is converted with
    *rates* (a RateRepository) first.
    """
    for limit in limits:
        if not limit.applies_to(corridor):
            continue

        if limit.side == LimitSide.ORIGIN:
            amount, currency = amount_sent, corridor.origin_currency.value
        else:
            amount, currency = amount_received, corridor.destination_currency.value

        if currency != limit.currency:
            amount = amount * await rates.get_exchange_rate(currency, limit.currency)

        if amount > limit.ceiling:
            raise TransferLimitExceededError(limit.description)
