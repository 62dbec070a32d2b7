"""
Reference data endpoints: exchange rates, fee rules, ceilings and corridors.

All public; the simulator loads these before the user signs in.
"""

from fastapi import APIRouter, Depends

from kundapay.api.deps import get_rate_repository
from kundapay.core.corridors import (
    DEFAULT_METHODS,
    METHOD_LABELS,
    PAYMENT_METHODS_BY_DIRECTION,
    RECEIVING_METHODS_BY_DIRECTION,
    TransferDirection,
    resolve_corridor,
)
from kundapay.schemas.rate import (
    CorridorData,
    ExchangeRateData,
    FeeRuleData,
    MethodOption,
    TransferLimitData,
)
from kundapay.services.limit_service import default_limits
from kundapay.services.rate_service import RateRepository

router = APIRouter()


def _options(methods) -> list[MethodOption]:
    return [MethodOption(value=m.value, label=METHOD_LABELS[m.value]) for m in methods]


@router.get("/exchange-rates", response_model=list[ExchangeRateData])
async def list_exchange_rates(rates: RateRepository = Depends(get_rate_repository)):
    """All configured currency pairs and their rates."""
    records = await rates.list_exchange_rates()
    return [
        ExchangeRateData(from_currency=r.from_currency, to_currency=r.to_currency, rate=r.rate)
        for r in records
    ]


@router.get("/fees", response_model=list[FeeRuleData])
async def list_fee_rules(rates: RateRepository = Depends(get_rate_repository)):
    """All configured fee percentages by route and method pair."""
    records = await rates.list_fee_rules()
    return [
        FeeRuleData(
            from_country=r.from_country,
            to_country=r.to_country,
            payment_method=r.payment_method,
            receiving_method=r.receiving_method,
            fee_percentage=r.fee_percentage,
        )
        for r in records
    ]


@router.get("/limits", response_model=list[TransferLimitData])
async def list_transfer_limits():
    """Per-transfer ceilings and the corridors they apply to."""
    return [
        TransferLimitData(
            country=limit.country.value,
            side=limit.side.value,
            ceiling=limit.ceiling,
            currency=limit.currency,
            description=limit.description,
        )
        for limit in default_limits()
    ]


@router.get("/corridors", response_model=list[CorridorData])
async def list_corridors():
    """Supported directions with their currencies and accepted methods."""
    corridors = []
    for direction in TransferDirection:
        corridor = resolve_corridor(direction)
        default_payment, default_receiving = DEFAULT_METHODS[direction]
        corridors.append(CorridorData(
            direction=direction.value,
            origin_country=corridor.origin_country.value,
            destination_country=corridor.destination_country.value,
            origin_currency=corridor.origin_currency.value,
            destination_currency=corridor.destination_currency.value,
            payment_methods=_options(PAYMENT_METHODS_BY_DIRECTION[direction]),
            receiving_methods=_options(RECEIVING_METHODS_BY_DIRECTION[direction]),
            default_payment_method=default_payment.value,
            default_receiving_method=default_receiving.value,
        ))
    return corridors
