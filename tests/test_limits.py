"""Tests for corridor transfer ceilings."""

from decimal import Decimal

import pytest

from kundapay.core.corridors import CountryCode, resolve_corridor
from kundapay.core.exceptions import RateUnavailableError, TransferLimitExceededError
from kundapay.services.limit_service import (
    LimitSide,
    TransferLimit,
    check_transfer_limits,
    default_limits,
)


class TestDefaultLimits:
    def test_two_gabon_ceilings(self):
        limits = default_limits()
        assert [(l.country, l.side) for l in limits] == [
            (CountryCode.GA, LimitSide.ORIGIN),
            (CountryCode.GA, LimitSide.DESTINATION),
        ]
        assert limits[0].ceiling == Decimal("196788")
        assert limits[1].ceiling == Decimal("327980")

    def test_descriptions_show_exact_ceiling(self):
        limits = default_limits()
        assert limits[0].description == "transfers from Gabon are limited to 196 788 FCFA"
        assert limits[1].description == "transfers to Gabon are limited to 327 980 FCFA"

    def test_applies_to(self):
        outbound, inbound = default_limits()
        gabon_to_france = resolve_corridor("GABON_TO_FRANCE")
        france_to_gabon = resolve_corridor("FRANCE_TO_GABON")
        assert outbound.applies_to(gabon_to_france)
        assert not outbound.applies_to(france_to_gabon)
        assert inbound.applies_to(france_to_gabon)
        assert not inbound.applies_to(gabon_to_france)


class TestCheckTransferLimits:

    @pytest.mark.asyncio
    async def test_at_ceiling_passes(self, rates):
        await check_transfer_limits(
            default_limits(), resolve_corridor("GABON_TO_FRANCE"),
            Decimal("196788"), Decimal("284.00"), rates,
        )

    @pytest.mark.asyncio
    async def test_origin_ceiling_exceeded(self, rates):
        with pytest.raises(TransferLimitExceededError) as exc_info:
            await check_transfer_limits(
                default_limits(), resolve_corridor("GABON_TO_CHINA"),
                Decimal("196790"), Decimal("2052.10"), rates,
            )
        assert "from Gabon" in exc_info.value.message
        assert exc_info.value.message.startswith(
            "Amount exceeds the maximum allowed per transfer",
        )

    @pytest.mark.asyncio
    async def test_destination_ceiling_exceeded(self, rates):
        with pytest.raises(TransferLimitExceededError) as exc_info:
            await check_transfer_limits(
                default_limits(), resolve_corridor("FRANCE_TO_GABON"),
                Decimal("600.00"), Decimal("391605"), rates,
            )
        assert "to Gabon" in exc_info.value.ceiling_description

    @pytest.mark.asyncio
    async def test_ceiling_in_other_currency_converts(self, rates):
        eur_limit = TransferLimit(
            country=CountryCode.GA,
            side=LimitSide.ORIGIN,
            ceiling=Decimal("300"),
            currency="EUR",
            description="transfers from Gabon are limited to 300 EUR",
        )
        corridor = resolve_corridor("GABON_TO_FRANCE")

        # 190000 XAF converts to 289.56 EUR
        await check_transfer_limits([eur_limit], corridor, Decimal("190000"), Decimal("1"), rates)

        # 200000 XAF converts to 304.80 EUR
        with pytest.raises(TransferLimitExceededError):
            await check_transfer_limits(
                [eur_limit], corridor, Decimal("200000"), Decimal("1"), rates,
            )

    @pytest.mark.asyncio
    async def test_missing_conversion_rate_propagates(self, rates):
        usd_limit = TransferLimit(
            country=CountryCode.GA,
            side=LimitSide.ORIGIN,
            ceiling=Decimal("500"),
            currency="USD",
            description="500 USD",
        )
        with pytest.raises(RateUnavailableError):
            await check_transfer_limits(
                [usd_limit], resolve_corridor("GABON_TO_FRANCE"),
                Decimal("1000"), Decimal("1.44"), rates,
            )

    @pytest.mark.asyncio
    async def test_unrelated_corridor_ignored(self, rates):
        await check_transfer_limits(
            [], resolve_corridor("FRANCE_TO_GABON"),
            Decimal("10000000"), Decimal("10000000"), rates,
        )
