"""
Debounced quote requests with stale-result discard.

Library surface for in-process interactive callers (the simulator) that
recalculate on every keystroke; the HTTP API is stateless and calls
TransferQuoteCalculator directly. Each request gets a monotonically
increasing id; only the result of the latest issued request is ever
applied to the session state, regardless of the order in which
calculations complete.
"""

import asyncio
import logging
from decimal import Decimal, InvalidOperation

from kundapay.config import settings
from kundapay.core.exceptions import QuoteError
from kundapay.services.quote_service import TransferQuote, TransferQuoteCalculator

logger = logging.getLogger(__name__)


def _is_blank_amount(amount) -> bool:
    if amount is None or amount == "":
        return True
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        return True
    return not value.is_finite() or value <= 0


class QuoteSession:
    """Latest-request-wins wrapper around a TransferQuoteCalculator."""

    def __init__(
        self,
        calculator: TransferQuoteCalculator,
        debounce_seconds: float | None = None,
    ):
        self.calculator = calculator
        self.debounce_seconds = (
            settings.QUOTE_DEBOUNCE_SECONDS if debounce_seconds is None else debounce_seconds
        )
        self._issued = 0
        self.applied_request_id = 0
        self.quote: TransferQuote | None = None
        self.error: QuoteError | None = None

    @property
    def latest_request_id(self) -> int:
        return self._issued

    def _is_stale(self, request_id: int) -> bool:
        return request_id != self._issued

    def _apply(self, request_id: int, quote: TransferQuote | None, error: QuoteError | None) -> None:
        self.applied_request_id = request_id
        self.quote = quote
        self.error = error

    async def request(
        self,
        amount,
        direction,
        payment_method,
        receiving_method,
        is_receive_amount: bool = False,
        promo_code: str | None = None,
    ) -> TransferQuote | None:
        """
        Issue a calculation and return its quote if it is still current.

        Returns None when the request was superseded (during the debounce
        window or while calculating), when the amount is blank, or when
        the calculation failed; failures are kept in ``self.error``.
        """
        self._issued += 1
        request_id = self._issued

        if _is_blank_amount(amount):
            self._apply(request_id, None, None)
            return None

        if self.debounce_seconds > 0:
            await asyncio.sleep(self.debounce_seconds)
        if self._is_stale(request_id):
            return None

        try:
            quote = await self.calculator.calculate_transfer_details(
                amount,
                direction,
                payment_method,
                receiving_method,
                is_receive_amount=is_receive_amount,
                promo_code=promo_code,
            )
        except QuoteError as exc:
            if self._is_stale(request_id):
                logger.warning("Discarding stale quote error for request %d", request_id)
                return None
            self._apply(request_id, None, exc)
            return None

        if self._is_stale(request_id):
            logger.warning(
                "Discarding stale quote for request %d (latest is %d)",
                request_id, self._issued,
            )
            return None

        self._apply(request_id, quote, None)
        return quote
