"""
Transfer quote calculator.

Given an anchor amount (what the user typed, on the send or the receive
side), a direction and the chosen methods, resolves the fee percentage
and exchange rate, applies an optional promo code, and derives the
complementary amount with currency-specific rounding and corridor
ceilings.

    send anchor:     received = sent * (1 - fee) * rate
    receive anchor:  sent     = received / (rate * (1 - fee))
    fees:            sent * fee   (whichever side was the anchor)

Any failure aborts the calculation; callers never see a partial quote.
"""

import uuid
from dataclasses import asdict, dataclass
from decimal import Decimal, InvalidOperation

from kundapay.core.corridors import resolve_corridor
from kundapay.core.exceptions import InvalidAmountError
from kundapay.core.money import round_fee, round_receive_amount, round_send_amount
from kundapay.services.limit_service import TransferLimit, check_transfer_limits, default_limits
from kundapay.services.promo_service import PromoValidator, apply_promo_code
from kundapay.services.rate_service import RateRepository

# Largest anchor accepted: 10**16 keeps every rounded amount within the
# default 28-digit decimal context.
MAX_AMOUNT_EXPONENT = 15


@dataclass(frozen=True)
class TransferQuote:
    amount_sent: Decimal
    fees: Decimal
    amount_received: Decimal
    sender_currency: str
    receiver_currency: str
    exchange_rate: Decimal
    direction: str
    payment_method: str
    receiving_method: str
    promo_code_id: uuid.UUID | None
    original_fee_percentage: Decimal
    effective_fee_percentage: Decimal

    def to_dict(self) -> dict:
        return asdict(self)


def parse_amount(amount) -> Decimal:
    """Coerce *amount* to a positive finite Decimal or raise InvalidAmountError."""
    if amount is None or isinstance(amount, bool):
        raise InvalidAmountError()
    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        raise InvalidAmountError()
    if not value.is_finite() or value <= 0:
        raise InvalidAmountError()
    if value.adjusted() > MAX_AMOUNT_EXPONENT:
        raise InvalidAmountError("Amount is too large")
    return value


class TransferQuoteCalculator:
    """Computes TransferQuotes from injected rate, promo and limit sources."""

    def __init__(
        self,
        rates: RateRepository,
        promos: PromoValidator,
        limits: list[TransferLimit] | None = None,
    ):
        self.rates = rates
        self.promos = promos
        self.limits = default_limits() if limits is None else limits

    async def calculate_transfer_details(
        self,
        amount,
        direction,
        payment_method,
        receiving_method,
        is_receive_amount: bool = False,
        promo_code: str | None = None,
    ) -> TransferQuote:
        anchor = parse_amount(amount)
        corridor = resolve_corridor(direction)
        payment_method = getattr(payment_method, "value", payment_method)
        receiving_method = getattr(receiving_method, "value", receiving_method)

        base_fee = await self.rates.get_fee_percentage(
            corridor.origin_country.value,
            corridor.destination_country.value,
            payment_method,
            receiving_method,
        )
        exchange_rate = await self.rates.get_exchange_rate(
            corridor.origin_currency.value,
            corridor.destination_currency.value,
        )

        effective_fee, promo_code_id = await apply_promo_code(
            self.promos, promo_code, corridor.direction.value, base_fee, anchor,
        )

        if is_receive_amount:
            amount_received = anchor
            amount_sent = anchor / (exchange_rate * (1 - effective_fee))
        else:
            amount_sent = anchor
            amount_received = anchor * (1 - effective_fee) * exchange_rate

        amount_sent = round_send_amount(amount_sent, corridor.origin_currency)
        amount_received = round_receive_amount(amount_received, corridor.destination_currency)
        if amount_sent <= 0 or amount_received <= 0:
            raise InvalidAmountError("Amount is too small to transfer")
        fees = round_fee(amount_sent * effective_fee, corridor.origin_currency)

        await check_transfer_limits(
            self.limits, corridor, amount_sent, amount_received, self.rates,
        )

        return TransferQuote(
            amount_sent=amount_sent,
            fees=fees,
            amount_received=amount_received,
            sender_currency=corridor.origin_currency.value,
            receiver_currency=corridor.destination_currency.value,
            exchange_rate=exchange_rate,
            direction=corridor.direction.value,
            payment_method=payment_method,
            receiving_method=receiving_method,
            promo_code_id=promo_code_id,
            original_fee_percentage=base_fee,
            effective_fee_percentage=effective_fee,
        )
