"""
Quote error taxonomy.

Every error raised while computing a transfer quote derives from
``QuoteError`` and carries a user-facing ``message``. None of them are
retried; callers surface the message as-is.
"""


class QuoteError(Exception):
    """Base class for errors raised by the transfer quote calculator."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidAmountError(QuoteError):
    """Amount missing, non-numeric, or not strictly positive."""

    def __init__(self, message: str = "Amount must be greater than 0"):
        super().__init__(message)


class InvalidDirectionError(QuoteError):
    """Direction token does not resolve to a supported corridor."""

    def __init__(self, direction: object):
        super().__init__(f"Invalid transfer direction: {direction}")
        self.direction = direction


class RateUnavailableError(QuoteError):
    """No single exchange rate exists for the currency pair."""

    def __init__(self, from_currency: str, to_currency: str):
        super().__init__(
            f"Exchange rate not available ({from_currency} → {to_currency})"
        )
        self.from_currency = from_currency
        self.to_currency = to_currency


class FeeUnavailableError(QuoteError):
    """No single fee rule exists for the route and method combination."""

    def __init__(
        self,
        from_country: str,
        to_country: str,
        payment_method: str,
        receiving_method: str,
    ):
        super().__init__(
            f"Fees not available for this combination "
            f"({from_country} → {to_country}, {payment_method} / {receiving_method})"
        )
        self.from_country = from_country
        self.to_country = to_country
        self.payment_method = payment_method
        self.receiving_method = receiving_method


class PromoCodeInvalidError(QuoteError):
    """Promo code failed validation; message comes from the validator."""

    def __init__(self, message: str = "Invalid promo code"):
        super().__init__(message)


class TransferLimitExceededError(QuoteError):
    """Computed amount exceeds a corridor ceiling."""

    def __init__(self, ceiling_description: str):
        super().__init__(
            f"Amount exceeds the maximum allowed per transfer ({ceiling_description})"
        )
        self.ceiling_description = ceiling_description
