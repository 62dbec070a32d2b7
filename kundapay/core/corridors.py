"""
Corridor catalogue: countries, currencies, directions and methods.

A direction token such as ``FRANCE_TO_GABON`` resolves to an ordered
(origin, destination) country pair and their currencies. This module is
the single source of truth for which corridors exist and which payment
and receiving methods each one accepts.
"""

import enum
from dataclasses import dataclass

from kundapay.core.exceptions import InvalidDirectionError

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class CountryCode(str, enum.Enum):
    GA = "GA"
    FR = "FR"
    CN = "CN"
    US = "US"
    CA = "CA"


class CurrencyCode(str, enum.Enum):
    XAF = "XAF"
    EUR = "EUR"
    CNY = "CNY"
    USD = "USD"
    CAD = "CAD"


class PaymentMethod(str, enum.Enum):
    AIRTEL_MONEY = "AIRTEL_MONEY"
    MOOV_MONEY = "MOOV_MONEY"
    CASH = "CASH"
    BANK_TRANSFER = "BANK_TRANSFER"
    ALIPAY = "ALIPAY"
    CARD = "CARD"
    ACH = "ACH"
    PAYPAL = "PAYPAL"
    WERO = "WERO"
    INTERAC = "INTERAC"


class ReceivingMethod(str, enum.Enum):
    AIRTEL_MONEY = "AIRTEL_MONEY"
    MOOV_MONEY = "MOOV_MONEY"
    CASH = "CASH"
    BANK_TRANSFER = "BANK_TRANSFER"
    ALIPAY = "ALIPAY"
    CARD = "CARD"
    ACH = "ACH"
    VISA_DIRECT = "VISA_DIRECT"
    MASTERCARD_SEND = "MASTERCARD_SEND"
    WERO = "WERO"
    INTERAC = "INTERAC"


class TransferDirection(str, enum.Enum):
    GABON_TO_CHINA = "GABON_TO_CHINA"
    FRANCE_TO_GABON = "FRANCE_TO_GABON"
    GABON_TO_FRANCE = "GABON_TO_FRANCE"
    USA_TO_GABON = "USA_TO_GABON"
    GABON_TO_USA = "GABON_TO_USA"
    CANADA_TO_GABON = "CANADA_TO_GABON"
    GABON_TO_CANADA = "GABON_TO_CANADA"


# ---------------------------------------------------------------------------
# Lookup tables
# ---------------------------------------------------------------------------

# country -> (display name, currency)
COUNTRIES: dict[CountryCode, tuple[str, CurrencyCode]] = {
    CountryCode.GA: ("Gabon", CurrencyCode.XAF),
    CountryCode.FR: ("France", CurrencyCode.EUR),
    CountryCode.CN: ("Chine", CurrencyCode.CNY),
    CountryCode.US: ("États-Unis", CurrencyCode.USD),
    CountryCode.CA: ("Canada", CurrencyCode.CAD),
}

DIRECTION_COUNTRIES: dict[TransferDirection, tuple[CountryCode, CountryCode]] = {
    TransferDirection.GABON_TO_CHINA: (CountryCode.GA, CountryCode.CN),
    TransferDirection.FRANCE_TO_GABON: (CountryCode.FR, CountryCode.GA),
    TransferDirection.GABON_TO_FRANCE: (CountryCode.GA, CountryCode.FR),
    TransferDirection.USA_TO_GABON: (CountryCode.US, CountryCode.GA),
    TransferDirection.GABON_TO_USA: (CountryCode.GA, CountryCode.US),
    TransferDirection.CANADA_TO_GABON: (CountryCode.CA, CountryCode.GA),
    TransferDirection.GABON_TO_CANADA: (CountryCode.GA, CountryCode.CA),
}

_MOBILE_MONEY_OUT = [PaymentMethod.AIRTEL_MONEY, PaymentMethod.MOOV_MONEY, PaymentMethod.CASH]
_MOBILE_MONEY_IN = [ReceivingMethod.AIRTEL_MONEY, ReceivingMethod.MOOV_MONEY, ReceivingMethod.CASH]

PAYMENT_METHODS_BY_DIRECTION: dict[TransferDirection, list[PaymentMethod]] = {
    TransferDirection.GABON_TO_CHINA: _MOBILE_MONEY_OUT,
    TransferDirection.FRANCE_TO_GABON: [
        PaymentMethod.BANK_TRANSFER,
        PaymentMethod.WERO,
        PaymentMethod.CARD,
        PaymentMethod.PAYPAL,
    ],
    TransferDirection.GABON_TO_FRANCE: _MOBILE_MONEY_OUT,
    TransferDirection.USA_TO_GABON: [PaymentMethod.CARD, PaymentMethod.ACH, PaymentMethod.PAYPAL],
    TransferDirection.GABON_TO_USA: _MOBILE_MONEY_OUT,
    TransferDirection.CANADA_TO_GABON: [
        PaymentMethod.CARD,
        PaymentMethod.INTERAC,
        PaymentMethod.PAYPAL,
    ],
    TransferDirection.GABON_TO_CANADA: _MOBILE_MONEY_OUT,
}

RECEIVING_METHODS_BY_DIRECTION: dict[TransferDirection, list[ReceivingMethod]] = {
    TransferDirection.GABON_TO_CHINA: [ReceivingMethod.ALIPAY],
    TransferDirection.FRANCE_TO_GABON: _MOBILE_MONEY_IN,
    TransferDirection.GABON_TO_FRANCE: [
        ReceivingMethod.BANK_TRANSFER,
        ReceivingMethod.WERO,
    ],
    TransferDirection.USA_TO_GABON: _MOBILE_MONEY_IN,
    TransferDirection.GABON_TO_USA: [
        ReceivingMethod.ACH,
        ReceivingMethod.VISA_DIRECT,
        ReceivingMethod.MASTERCARD_SEND,
    ],
    TransferDirection.CANADA_TO_GABON: _MOBILE_MONEY_IN,
    TransferDirection.GABON_TO_CANADA: [
        ReceivingMethod.INTERAC,
        ReceivingMethod.VISA_DIRECT,
        ReceivingMethod.MASTERCARD_SEND,
    ],
}

DEFAULT_METHODS: dict[TransferDirection, tuple[PaymentMethod, ReceivingMethod]] = {
    TransferDirection.FRANCE_TO_GABON: (PaymentMethod.BANK_TRANSFER, ReceivingMethod.AIRTEL_MONEY),
    TransferDirection.GABON_TO_CHINA: (PaymentMethod.AIRTEL_MONEY, ReceivingMethod.ALIPAY),
    TransferDirection.GABON_TO_FRANCE: (PaymentMethod.AIRTEL_MONEY, ReceivingMethod.BANK_TRANSFER),
    TransferDirection.USA_TO_GABON: (PaymentMethod.CARD, ReceivingMethod.AIRTEL_MONEY),
    TransferDirection.GABON_TO_USA: (PaymentMethod.AIRTEL_MONEY, ReceivingMethod.ACH),
    TransferDirection.CANADA_TO_GABON: (PaymentMethod.CARD, ReceivingMethod.AIRTEL_MONEY),
    TransferDirection.GABON_TO_CANADA: (PaymentMethod.AIRTEL_MONEY, ReceivingMethod.INTERAC),
}

METHOD_LABELS: dict[str, str] = {
    "AIRTEL_MONEY": "Airtel Money",
    "MOOV_MONEY": "Moov Money",
    "CASH": "Espèces",
    "BANK_TRANSFER": "Virement bancaire",
    "ALIPAY": "Alipay",
    "CARD": "Carte bancaire",
    "ACH": "Virement ACH",
    "PAYPAL": "PayPal",
    "WERO": "Wero",
    "INTERAC": "Virement Interac",
    "VISA_DIRECT": "Visa Direct",
    "MASTERCARD_SEND": "Mastercard Send",
}


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Corridor:
    """An ordered origin/destination pair with its currencies."""
    direction: TransferDirection
    origin_country: CountryCode
    destination_country: CountryCode
    origin_currency: CurrencyCode
    destination_currency: CurrencyCode


def currency_for(country: CountryCode) -> CurrencyCode:
    """Return the currency used in *country*."""
    return COUNTRIES[country][1]


def resolve_corridor(direction: str | TransferDirection) -> Corridor:
    """
    Resolve a ``{ORIGIN}_TO_{DESTINATION}`` token to a Corridor.

    Raises InvalidDirectionError for anything that is not one of the
    supported directions.
    """
    try:
        token = TransferDirection(direction)
    except ValueError:
        raise InvalidDirectionError(direction)

    origin, destination = DIRECTION_COUNTRIES[token]
    return Corridor(
        direction=token,
        origin_country=origin,
        destination_country=destination,
        origin_currency=currency_for(origin),
        destination_currency=currency_for(destination),
    )


def direction_for(origin: CountryCode, destination: CountryCode) -> TransferDirection | None:
    """Return the direction for a country pair, or None if unsupported."""
    for direction, pair in DIRECTION_COUNTRIES.items():
        if pair == (origin, destination):
            return direction
    return None


def destinations_from(origin: CountryCode) -> list[CountryCode]:
    """Countries reachable from *origin*."""
    return [
        destination
        for src, destination in DIRECTION_COUNTRIES.values()
        if src == origin
    ]
