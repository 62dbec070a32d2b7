"""
Currency rounding and display helpers.

XAF (FCFA) is handled in whole multiples of 5: amounts the sender pays
round up, amounts the beneficiary receives round down. Every other
currency uses standard two-decimal minor units.
"""

from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal

XAF = "XAF"
XAF_STEP = Decimal("5")
CENT = Decimal("0.01")

# ISO 4217 minor units; anything not listed uses 2
CURRENCY_DECIMALS: dict[str, int] = {
    "XAF": 0,
}


def _code(currency) -> str:
    return getattr(currency, "value", currency)


def _to_step(amount: Decimal, step: Decimal, rounding: str) -> Decimal:
    return (amount / step).quantize(Decimal("1"), rounding=rounding) * step


def round_send_amount(amount: Decimal, currency) -> Decimal:
    """Round an amount paid by the sender (XAF: ceiling to a multiple of 5)."""
    if _code(currency) == XAF:
        return _to_step(amount, XAF_STEP, ROUND_CEILING)
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def round_receive_amount(amount: Decimal, currency) -> Decimal:
    """Round an amount paid out to the beneficiary (XAF: floor to a multiple of 5)."""
    if _code(currency) == XAF:
        return _to_step(amount, XAF_STEP, ROUND_FLOOR)
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def round_fee(amount: Decimal, currency) -> Decimal:
    """Round a fee to the currency's minor unit."""
    decimals = CURRENCY_DECIMALS.get(_code(currency), 2)
    return amount.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)


def _group_thousands(integer_part: str) -> str:
    groups = []
    while len(integer_part) > 3:
        groups.insert(0, integer_part[-3:])
        integer_part = integer_part[:-3]
    groups.insert(0, integer_part)
    return " ".join(groups)


def format_currency(amount: Decimal | None, currency) -> str:
    """
    Format an amount for display using French conventions.

    XAF is shown to the nearest 5 with the ``FCFA`` suffix; other
    currencies are shown with two decimals and a comma separator.
    """
    code = _code(currency)
    if amount is None or not amount.is_finite():
        return "0"

    if code == XAF:
        rounded = _to_step(amount, XAF_STEP, ROUND_HALF_UP)
        sign = "-" if rounded < 0 else ""
        return f"{sign}{_group_thousands(str(abs(int(rounded))))} FCFA"

    rounded = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    integer_part, _, fraction = f"{abs(rounded):.2f}".partition(".")
    return f"{sign}{_group_thousands(integer_part)},{fraction} {code}"
