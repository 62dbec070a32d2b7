"""
Rate & fee lookup: exchange rates and fee percentages per route.

Repositories expose the same four async reads. The calculator depends
only on the ``RateRepository`` protocol, so tests inject a
``StaticRateRepository`` while the API wires the database-backed one,
optionally behind a short-lived Redis cache.
"""

import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kundapay.config import settings
from kundapay.core.exceptions import FeeUnavailableError, RateUnavailableError
from kundapay.models.exchange_rate import ExchangeRate
from kundapay.models.transfer_fee import TransferFee

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

RATE_CACHE_PREFIX = "rate:"
FEE_CACHE_PREFIX = "fee:"

# (from_currency, to_currency) -> rate
DEFAULT_EXCHANGE_RATES: dict[tuple[str, str], Decimal] = {
    ("EUR", "XAF"): Decimal("655.96"),
    ("XAF", "EUR"): Decimal("0.001524"),
    ("EUR", "CNY"): Decimal("7.5099"),
    ("CNY", "EUR"): Decimal("0.133157"),
    ("XAF", "CNY"): Decimal("0.011445"),
    ("CNY", "XAF"): Decimal("87.34"),
}

# (from_country, to_country, payment_method, receiving_method) -> fee fraction
DEFAULT_TRANSFER_FEES: dict[tuple[str, str, str, str], Decimal] = {
    ("GA", "CN", "AIRTEL_MONEY", "ALIPAY"): Decimal("0.085"),
    ("GA", "CN", "CASH", "ALIPAY"): Decimal("0.075"),
    ("FR", "GA", "BANK_TRANSFER", "AIRTEL_MONEY"): Decimal("0.005"),
    ("FR", "GA", "BANK_TRANSFER", "CASH"): Decimal("0.004"),
    ("GA", "FR", "AIRTEL_MONEY", "BANK_TRANSFER"): Decimal("0.055"),
    ("GA", "FR", "CASH", "BANK_TRANSFER"): Decimal("0.04"),
}


def _code(value) -> str:
    return getattr(value, "value", value)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RateRecord:
    from_currency: str
    to_currency: str
    rate: Decimal


@dataclass(frozen=True)
class FeeRecord:
    from_country: str
    to_country: str
    payment_method: str
    receiving_method: str
    fee_percentage: Decimal


# ---------------------------------------------------------------------------
# Repository protocol
# ---------------------------------------------------------------------------


class RateRepository(Protocol):
    async def get_exchange_rate(self, from_currency: str, to_currency: str) -> Decimal:
        """Rate for the pair; 1 for identical currencies. Raises RateUnavailableError."""
        ...

    async def get_fee_percentage(
        self,
        from_country: str,
        to_country: str,
        payment_method: str,
        receiving_method: str,
    ) -> Decimal:
        """Fee fraction for the route/method combination. Raises FeeUnavailableError."""
        ...

    async def list_exchange_rates(self) -> list[RateRecord]:
        ...

    async def list_fee_rules(self) -> list[FeeRecord]:
        ...


class StaticRateRepository:
    """In-memory rate and fee tables for development and tests."""

    def __init__(
        self,
        rates: dict[tuple[str, str], Decimal] | None = None,
        fees: dict[tuple[str, str, str, str], Decimal] | None = None,
    ):
        self.rates = dict(DEFAULT_EXCHANGE_RATES if rates is None else rates)
        self.fees = dict(DEFAULT_TRANSFER_FEES if fees is None else fees)

    async def get_exchange_rate(self, from_currency, to_currency) -> Decimal:
        src, dst = _code(from_currency), _code(to_currency)
        if src == dst:
            return Decimal("1")
        rate = self.rates.get((src, dst))
        if rate is None:
            raise RateUnavailableError(src, dst)
        return rate

    async def get_fee_percentage(
        self, from_country, to_country, payment_method, receiving_method,
    ) -> Decimal:
        key = (
            _code(from_country), _code(to_country),
            _code(payment_method), _code(receiving_method),
        )
        fee = self.fees.get(key)
        if fee is None:
            raise FeeUnavailableError(*key)
        return fee

    async def list_exchange_rates(self) -> list[RateRecord]:
        return [RateRecord(src, dst, rate) for (src, dst), rate in sorted(self.rates.items())]

    async def list_fee_rules(self) -> list[FeeRecord]:
        return [FeeRecord(*key, fee) for key, fee in sorted(self.fees.items())]


class DatabaseRateRepository:
    """Reads the ``exchange_rates`` and ``transfer_fees`` tables."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_exchange_rate(self, from_currency, to_currency) -> Decimal:
        src, dst = _code(from_currency), _code(to_currency)
        if src == dst:
            return Decimal("1")

        result = await self.db.execute(
            select(ExchangeRate.rate).where(
                ExchangeRate.from_currency == src,
                ExchangeRate.to_currency == dst,
            )
        )
        rows = list(result.scalars().all())
        if len(rows) != 1:
            raise RateUnavailableError(src, dst)
        return Decimal(rows[0])

    async def get_fee_percentage(
        self, from_country, to_country, payment_method, receiving_method,
    ) -> Decimal:
        key = (
            _code(from_country), _code(to_country),
            _code(payment_method), _code(receiving_method),
        )
        result = await self.db.execute(
            select(TransferFee.fee_percentage).where(
                TransferFee.from_country == key[0],
                TransferFee.to_country == key[1],
                TransferFee.payment_method == key[2],
                TransferFee.receiving_method == key[3],
            )
        )
        rows = list(result.scalars().all())
        if len(rows) != 1:
            raise FeeUnavailableError(*key)
        return Decimal(rows[0])

    async def list_exchange_rates(self) -> list[RateRecord]:
        result = await self.db.execute(
            select(ExchangeRate).order_by(ExchangeRate.from_currency, ExchangeRate.to_currency)
        )
        return [
            RateRecord(r.from_currency, r.to_currency, Decimal(r.rate))
            for r in result.scalars().all()
        ]

    async def list_fee_rules(self) -> list[FeeRecord]:
        result = await self.db.execute(
            select(TransferFee).order_by(TransferFee.from_country, TransferFee.to_country)
        )
        return [
            FeeRecord(
                f.from_country, f.to_country,
                f.payment_method, f.receiving_method,
                Decimal(f.fee_percentage),
            )
            for f in result.scalars().all()
        ]


class CachedRateRepository:
    """
    Read-through Redis cache in front of another repository.

    Entries live for ``ttl_seconds``; lookup failures are never cached,
    so a route that becomes configured is quotable on the next call.
    """

    def __init__(self, inner: RateRepository, redis, ttl_seconds: int | None = None):
        self.inner = inner
        self.redis = redis
        self.ttl_seconds = settings.RATE_CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds

    async def _cached(self, key: str, fetch) -> Decimal:
        cached = await self.redis.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return Decimal(json.loads(cached))

        value = await fetch()
        await self.redis.setex(key, self.ttl_seconds, json.dumps(str(value)))
        return value

    async def get_exchange_rate(self, from_currency, to_currency) -> Decimal:
        src, dst = _code(from_currency), _code(to_currency)
        if src == dst:
            return Decimal("1")
        return await self._cached(
            f"{RATE_CACHE_PREFIX}{src}:{dst}",
            lambda: self.inner.get_exchange_rate(src, dst),
        )

    async def get_fee_percentage(
        self, from_country, to_country, payment_method, receiving_method,
    ) -> Decimal:
        key = (
            _code(from_country), _code(to_country),
            _code(payment_method), _code(receiving_method),
        )
        return await self._cached(
            FEE_CACHE_PREFIX + ":".join(key),
            lambda: self.inner.get_fee_percentage(*key),
        )

    async def list_exchange_rates(self) -> list[RateRecord]:
        return await self.inner.list_exchange_rates()

    async def list_fee_rules(self) -> list[FeeRecord]:
        return await self.inner.list_fee_rules()


# ---------------------------------------------------------------------------
# Repository wiring
# ---------------------------------------------------------------------------

# Module-level repository override (for tests)
_repository: RateRepository | None = None


def build_rate_repository(db: AsyncSession, redis) -> RateRepository:
    """Return the configured repository for a request."""
    if _repository is not None:
        return _repository
    repository: RateRepository = DatabaseRateRepository(db)
    if settings.RATE_CACHE_TTL_SECONDS > 0:
        repository = CachedRateRepository(repository, redis)
    return repository


def set_rate_repository(repository: RateRepository | None) -> None:
    """Override the rate repository (for testing)."""
    global _repository
    _repository = repository
