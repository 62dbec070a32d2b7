"""Tests for the PromoCode model: applicability window and usage cap."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from kundapay.models.promo_code import DiscountType, PromoCode

NOW = datetime(2026, 6, 1, tzinfo=timezone.utc)


@pytest.fixture
def promo():
    return PromoCode(
        code="BIENVENUE",
        direction="FRANCE_TO_GABON",
        discount_type=DiscountType.PERCENTAGE,
        discount_value=Decimal("50"),
        start_date=NOW - timedelta(days=1),
        end_date=NOW + timedelta(days=1),
        max_uses=2,
    )


class TestPromoCode:
    def test_defaults(self, promo):
        assert promo.id is not None
        assert promo.current_uses == 0
        assert promo.active is True

    def test_active_inside_window(self, promo):
        assert promo.is_active_at(NOW)

    def test_window_bounds_inclusive(self, promo):
        assert promo.is_within_window(promo.start_date)
        assert promo.is_within_window(promo.end_date)
        assert not promo.is_within_window(promo.end_date + timedelta(seconds=1))

    def test_inactive_flag(self, promo):
        promo.active = False
        assert not promo.is_active_at(NOW)

    def test_exhausted(self, promo):
        promo.current_uses = 2
        assert promo.is_exhausted()
        assert not promo.is_active_at(NOW)

    def test_unlimited(self, promo):
        promo.max_uses = None
        promo.current_uses = 1_000
        assert not promo.is_exhausted()

    def test_repr(self, promo):
        assert "BIENVENUE" in repr(promo)
        assert "PERCENTAGE" in repr(promo)
