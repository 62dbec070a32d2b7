"""
Payment service: hosted card checkout and manual payment instructions.

Card, ACH and PayPal payments go through a Stripe Checkout Session.
Mobile money, cash, bank transfer and Wero are paid manually; the sender
gets instructions and an administrator confirms receipt.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

import httpx

from kundapay.config import settings
from kundapay.core.money import CURRENCY_DECIMALS

logger = logging.getLogger(__name__)

CHECKOUT_METHODS = {"CARD", "ACH", "PAYPAL"}

_STRIPE_METHOD_TYPES = {
    "CARD": "card",
    "ACH": "us_bank_account",
    "PAYPAL": "paypal",
}


def _code(value) -> str:
    return getattr(value, "value", value)


def requires_checkout(payment_method) -> bool:
    """True if the method is paid through the hosted checkout page."""
    return _code(payment_method) in CHECKOUT_METHODS


def payment_method_types(payment_method) -> list[str]:
    """Stripe payment_method_types for a KundaPay payment method."""
    return [_STRIPE_METHOD_TYPES.get(_code(payment_method), "card")]


def payment_instructions(payment_method) -> str | None:
    """Manual payment instructions, or None for checkout methods."""
    method = _code(payment_method)
    if method == "AIRTEL_MONEY":
        return (
            f"Send the Airtel Money payment to {settings.AIRTEL_MONEY_NUMBER} "
            f"in the name of {settings.AIRTEL_MONEY_ACCOUNT_NAME}."
        )
    if method == "CASH":
        return (
            f"Cash deposit details will be sent to you on WhatsApp "
            f"({settings.WHATSAPP_NUMBER})."
        )
    if method == "BANK_TRANSFER":
        return "Bank transfer details will be sent to you by email."
    if method == "WERO":
        return f"Send the Wero payment to {settings.WHATSAPP_NUMBER}."
    return None


def to_minor_units(amount: Decimal, currency: str) -> int:
    """Convert an amount to the currency's smallest unit (cents for EUR)."""
    decimals = CURRENCY_DECIMALS.get(currency.upper(), 2)
    scaled = (Decimal(amount) * (Decimal(10) ** decimals)).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP,
    )
    return int(scaled)


class PaymentService:
    """Stripe Checkout integration for card, ACH and PayPal payments."""

    def __init__(self):
        self.api_url = settings.STRIPE_API_URL
        self.secret_key = settings.STRIPE_SECRET_KEY

    async def create_checkout_session(
        self,
        amount: Decimal,
        currency: str,
        direction: str,
        payment_method: str,
        recipient_name: str,
        transfer_reference: str,
    ) -> dict:
        """
        Create a Checkout Session and return ``{session_id, session_url}``.

        When STRIPE_SECRET_KEY is empty (dev/test), returns a mock session.
        Otherwise calls the Stripe API.
        """
        if amount <= 0:
            raise ValueError("Checkout amount must be greater than 0")

        if not self.secret_key:
            session_id = f"cs_test_{transfer_reference}"
            return {
                "session_id": session_id,
                "session_url": f"{settings.PUBLIC_APP_URL}/dashboard?session_id={session_id}",
            }

        form = {
            "mode": "payment",
            "locale": "fr",
            "line_items[0][quantity]": "1",
            "line_items[0][price_data][currency]": currency.lower(),
            "line_items[0][price_data][unit_amount]": str(to_minor_units(amount, currency)),
            "line_items[0][price_data][product_data][name]": "Transfert KundaPay",
            "line_items[0][price_data][product_data][description]": (
                f"Référence: {transfer_reference}"
            ),
            "success_url": (
                f"{settings.PUBLIC_APP_URL}/dashboard?session_id={{CHECKOUT_SESSION_ID}}"
            ),
            "cancel_url": f"{settings.PUBLIC_APP_URL}/transfer",
            "metadata[direction]": _code(direction),
            "metadata[transferReference]": transfer_reference,
            "metadata[recipientId]": recipient_name,
        }
        for i, method_type in enumerate(payment_method_types(payment_method)):
            form[f"payment_method_types[{i}]"] = method_type

        async with httpx.AsyncClient(timeout=15) as client:
            resp = await client.post(
                f"{self.api_url}/checkout/sessions",
                data=form,
                auth=(self.secret_key, ""),
            )
            resp.raise_for_status()
            session = resp.json()

        if not session.get("url"):
            raise RuntimeError("Failed to create checkout session")

        logger.info("Checkout session %s created for %s", session["id"], transfer_reference)
        return {"session_id": session["id"], "session_url": session["url"]}


payment_service = PaymentService()
