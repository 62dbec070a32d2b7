"""
Reference data seeder: populates rates, fees and promo codes for development.

Usage:
    python scripts/seed_data.py

Creates:
  - exchange rates for every configured currency pair
  - fee percentages for every configured route/method combination
  - 2 sample promo codes (one percentage, one fixed)

Idempotent: existing rows are updated in place, never duplicated.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import select

from kundapay.database import async_session
from kundapay.models.exchange_rate import ExchangeRate
from kundapay.models.promo_code import DiscountType, PromoCode
from kundapay.models.transfer_fee import TransferFee
from kundapay.services.rate_service import DEFAULT_EXCHANGE_RATES, DEFAULT_TRANSFER_FEES

# ---------------------------------------------------------------------------
# Promo codes
# ---------------------------------------------------------------------------

SAMPLE_PROMO_CODES: list[dict] = [
    {
        "code": "BIENVENUE",
        "direction": "FRANCE_TO_GABON",
        "discount_type": DiscountType.PERCENTAGE,
        "discount_value": Decimal("50"),
        "max_uses": 500,
    },
    {
        "code": "KUNDA5",
        "direction": "GABON_TO_FRANCE",
        "discount_type": DiscountType.FIXED,
        "discount_value": Decimal("5000"),
        "max_uses": None,
    },
]


async def seed() -> None:
    """Upsert reference data."""
    now = datetime.now(timezone.utc)

    async with async_session() as session:
        # ==================================================================
        # 1. EXCHANGE RATES
        # ==================================================================

        result = await session.execute(select(ExchangeRate))
        existing_rates = {(r.from_currency, r.to_currency): r for r in result.scalars().all()}

        new_count = 0
        for (src, dst), rate in DEFAULT_EXCHANGE_RATES.items():
            row = existing_rates.get((src, dst))
            if row is None:
                session.add(ExchangeRate(from_currency=src, to_currency=dst, rate=rate))
                new_count += 1
            else:
                row.rate = rate
        print(f"  Exchange rates: {new_count} new, {len(DEFAULT_EXCHANGE_RATES) - new_count} updated")

        # ==================================================================
        # 2. TRANSFER FEES
        # ==================================================================

        result = await session.execute(select(TransferFee))
        existing_fees = {
            (f.from_country, f.to_country, f.payment_method, f.receiving_method): f
            for f in result.scalars().all()
        }

        new_count = 0
        for key, fee in DEFAULT_TRANSFER_FEES.items():
            row = existing_fees.get(key)
            if row is None:
                from_country, to_country, payment_method, receiving_method = key
                session.add(TransferFee(
                    from_country=from_country,
                    to_country=to_country,
                    payment_method=payment_method,
                    receiving_method=receiving_method,
                    fee_percentage=fee,
                ))
                new_count += 1
            else:
                row.fee_percentage = fee
        print(f"  Transfer fees: {new_count} new, {len(DEFAULT_TRANSFER_FEES) - new_count} updated")

        # ==================================================================
        # 3. PROMO CODES
        # ==================================================================

        result = await session.execute(select(PromoCode.code, PromoCode.direction))
        existing_codes = {(code, direction) for code, direction in result.all()}

        new_count = 0
        for data in SAMPLE_PROMO_CODES:
            if (data["code"], data["direction"]) in existing_codes:
                continue
            session.add(PromoCode(
                start_date=now,
                end_date=now + timedelta(days=90),
                **data,
            ))
            new_count += 1
        print(f"  Promo codes: {new_count} new, {len(SAMPLE_PROMO_CODES) - new_count} existing")

        await session.commit()
        print("\n  Seed complete!")


if __name__ == "__main__":
    asyncio.run(seed())
