"""
Pydantic schemas for exchange rates, fee rules, ceilings and corridors.
"""

from decimal import Decimal

from pydantic import BaseModel


class ExchangeRateData(BaseModel):
    from_currency: str
    to_currency: str
    rate: Decimal


class FeeRuleData(BaseModel):
    from_country: str
    to_country: str
    payment_method: str
    receiving_method: str
    fee_percentage: Decimal


class TransferLimitData(BaseModel):
    country: str
    side: str
    ceiling: Decimal
    currency: str
    description: str


class MethodOption(BaseModel):
    value: str
    label: str


class CorridorData(BaseModel):
    """A supported direction with its currencies and accepted methods."""
    direction: str
    origin_country: str
    destination_country: str
    origin_currency: str
    destination_currency: str
    payment_methods: list[MethodOption]
    receiving_methods: list[MethodOption]
    default_payment_method: str
    default_receiving_method: str
