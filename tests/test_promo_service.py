"""Tests for promo code validation and fee discounting."""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from kundapay.core.exceptions import PromoCodeInvalidError
from kundapay.models.promo_code import DiscountType, PromoCode
from kundapay.services.promo_service import (
    DatabasePromoValidator,
    FixedDiscount,
    PercentageDiscount,
    PromoValidation,
    apply_promo_code,
    record_promo_usage,
)

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def _make_promo(**overrides) -> PromoCode:
    defaults = dict(
        code="BIENVENUE",
        direction="FRANCE_TO_GABON",
        discount_type=DiscountType.PERCENTAGE,
        discount_value=Decimal("50"),
        start_date=NOW - timedelta(days=1),
        end_date=NOW + timedelta(days=30),
        max_uses=100,
    )
    defaults.update(overrides)
    return PromoCode(**defaults)


@pytest.fixture
def validator(mock_db):
    return DatabasePromoValidator(mock_db, clock=lambda: NOW)


def _returns(mock_db, make_result, *promos):
    mock_db.execute = AsyncMock(return_value=make_result(rows=list(promos)))


# ---------------------------------------------------------------------------
# Discount variants
# ---------------------------------------------------------------------------


class TestDiscounts:
    def test_percentage_halves_fee(self):
        discount = PercentageDiscount(Decimal("50"))
        assert discount.apply_to(Decimal("0.005"), Decimal("100")) == Decimal("0.0025")

    def test_percentage_over_hundred_clamps_to_zero(self):
        discount = PercentageDiscount(Decimal("150"))
        assert discount.apply_to(Decimal("0.005"), Decimal("100")) == Decimal("0")

    def test_fixed_converted_against_anchor(self):
        discount = FixedDiscount(Decimal("1000"))
        # 1000 off a 100000 anchor = 1 percentage point
        assert discount.apply_to(Decimal("0.055"), Decimal("100000")) == Decimal("0.045")

    def test_fixed_larger_than_fee_clamps_to_zero(self):
        discount = FixedDiscount(Decimal("5000"))
        assert discount.apply_to(Decimal("0.055"), Decimal("10000")) == Decimal("0")

    def test_validation_builds_variant(self):
        validation = PromoValidation(
            valid=True, message="Promo code applied",
            discount_type=DiscountType.FIXED, discount_value=Decimal("5"),
        )
        assert validation.discount() == FixedDiscount(Decimal("5"))


# ---------------------------------------------------------------------------
# DatabasePromoValidator
# ---------------------------------------------------------------------------


class TestDatabasePromoValidator:

    @pytest.mark.asyncio
    async def test_valid_code(self, validator, mock_db, make_result):
        promo = _make_promo()
        _returns(mock_db, make_result, promo)

        result = await validator.validate_promo_code("bienvenue", "FRANCE_TO_GABON")

        assert result.valid is True
        assert result.message == "Promo code applied"
        assert result.discount_type == DiscountType.PERCENTAGE
        assert result.discount_value == Decimal("50")
        assert result.promo_code_id == promo.id

    @pytest.mark.asyncio
    async def test_blank_code_skips_query(self, validator, mock_db):
        result = await validator.validate_promo_code("   ", "FRANCE_TO_GABON")
        assert result.valid is False
        assert result.message == "Invalid promo code"
        mock_db.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_code(self, validator, mock_db, make_result):
        _returns(mock_db, make_result)
        result = await validator.validate_promo_code("NOPE", "FRANCE_TO_GABON")
        assert result.valid is False
        assert result.message == "Invalid promo code"

    @pytest.mark.asyncio
    async def test_wrong_direction(self, validator, mock_db, make_result):
        _returns(mock_db, make_result, _make_promo(direction="GABON_TO_FRANCE"))
        result = await validator.validate_promo_code("BIENVENUE", "FRANCE_TO_GABON")
        assert result.valid is False
        assert result.message == "This promo code is not valid for this transfer direction"

    @pytest.mark.asyncio
    async def test_picks_row_for_direction(self, validator, mock_db, make_result):
        other = _make_promo(direction="GABON_TO_FRANCE")
        match = _make_promo(discount_value=Decimal("20"))
        _returns(mock_db, make_result, other, match)

        result = await validator.validate_promo_code("BIENVENUE", "FRANCE_TO_GABON")

        assert result.valid is True
        assert result.promo_code_id == match.id

    @pytest.mark.asyncio
    async def test_inactive(self, validator, mock_db, make_result):
        _returns(mock_db, make_result, _make_promo(active=False))
        result = await validator.validate_promo_code("BIENVENUE", "FRANCE_TO_GABON")
        assert result.message == "This promo code is no longer active"

    @pytest.mark.asyncio
    async def test_not_started(self, validator, mock_db, make_result):
        _returns(mock_db, make_result, _make_promo(start_date=NOW + timedelta(hours=1)))
        result = await validator.validate_promo_code("BIENVENUE", "FRANCE_TO_GABON")
        assert result.message == "This promo code is not yet valid"

    @pytest.mark.asyncio
    async def test_expired(self, validator, mock_db, make_result):
        _returns(mock_db, make_result, _make_promo(end_date=NOW - timedelta(seconds=1)))
        result = await validator.validate_promo_code("BIENVENUE", "FRANCE_TO_GABON")
        assert result.message == "This promo code has expired"

    @pytest.mark.asyncio
    async def test_exhausted(self, validator, mock_db, make_result):
        _returns(mock_db, make_result, _make_promo(max_uses=3, current_uses=3))
        result = await validator.validate_promo_code("BIENVENUE", "FRANCE_TO_GABON")
        assert result.message == "This promo code has reached its maximum number of uses"

    @pytest.mark.asyncio
    async def test_unlimited_uses(self, validator, mock_db, make_result):
        _returns(mock_db, make_result, _make_promo(max_uses=None, current_uses=10_000))
        result = await validator.validate_promo_code("BIENVENUE", "FRANCE_TO_GABON")
        assert result.valid is True


# ---------------------------------------------------------------------------
# apply_promo_code / record_promo_usage
# ---------------------------------------------------------------------------


class TestApplyPromoCode:

    @pytest.mark.asyncio
    async def test_no_code_returns_base_fee(self, promos):
        fee, promo_id = await apply_promo_code(
            promos, None, "FRANCE_TO_GABON", Decimal("0.005"), Decimal("100"),
        )
        assert fee == Decimal("0.005")
        assert promo_id is None
        assert promos.calls == []

    @pytest.mark.asyncio
    async def test_valid_code_discounts_fee(self, promos):
        promo_id = uuid.uuid4()
        promos.codes[("BIENVENUE", "FRANCE_TO_GABON")] = PromoValidation(
            valid=True, message="Promo code applied",
            discount_type=DiscountType.PERCENTAGE, discount_value=Decimal("50"),
            promo_code_id=promo_id,
        )
        fee, applied = await apply_promo_code(
            promos, "BIENVENUE", "FRANCE_TO_GABON", Decimal("0.005"), Decimal("100"),
        )
        assert fee == Decimal("0.0025")
        assert applied == promo_id

    @pytest.mark.asyncio
    async def test_invalid_code_raises_with_message(self, promos):
        promos.codes[("OLD", "FRANCE_TO_GABON")] = PromoValidation(
            valid=False, message="This promo code has expired",
        )
        with pytest.raises(PromoCodeInvalidError) as exc_info:
            await apply_promo_code(
                promos, "OLD", "FRANCE_TO_GABON", Decimal("0.005"), Decimal("100"),
            )
        assert exc_info.value.message == "This promo code has expired"

    @pytest.mark.asyncio
    async def test_record_usage_issues_update(self, mock_db):
        await record_promo_usage(mock_db, uuid.uuid4())
        mock_db.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_record_usage_update_checks_cap(self, mock_db):
        await record_promo_usage(mock_db, uuid.uuid4())

        stmt = mock_db.execute.call_args.args[0]
        sql = str(stmt)
        assert sql.startswith("UPDATE promo_codes")
        assert "promo_codes.max_uses IS NULL" in sql
        assert "promo_codes.current_uses < promo_codes.max_uses" in sql

    @pytest.mark.asyncio
    async def test_record_usage_on_exhausted_code_raises(self, mock_db, make_result):
        """Two transfers racing for the last use: the second UPDATE matches no row."""
        mock_db.execute = AsyncMock(return_value=make_result(rowcount=0))

        with pytest.raises(PromoCodeInvalidError) as exc_info:
            await record_promo_usage(mock_db, uuid.uuid4())

        assert exc_info.value.message == "This promo code has reached its maximum number of uses"
