# storefront/services/payment_client.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List

import stripe

from storefront.domain.errors import CheckoutError, PaymentGatewayError
from storefront.domain.schemas import CheckoutItemIn, PaymentItemIn
from storefront.utils.retry import stripe_retry
from storefront.utils.settings import STRIPE_CURRENCY, STRIPE_SECRET_KEY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SESSION_EXPAND = [
    "line_items",
    "line_items.data.price.product",
    "customer",
    "payment_intent",
]


def to_cents(amount: Decimal) -> int:
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentClient:
    """Thin wrapper over the Stripe API: hosted checkout sessions and payment intents."""

    def __init__(self, api_key: str | None = None, currency: str | None = None):
        self.api_key = api_key or STRIPE_SECRET_KEY
        self.currency = currency or STRIPE_CURRENCY

    def _require_key(self):
        if not self.api_key:
            raise PaymentGatewayError("Payment gateway is not configured")

    def create_checkout_session(self, items: List[CheckoutItemIn], origin: str) -> Dict[str, Any]:
        if not items:
            raise CheckoutError("No items to checkout")
        self._require_key()

        origin = origin.rstrip("/")
        logger.info(f"Creating checkout session for {len(items)} line items")
        session = self._call(
            stripe.checkout.Session.create,
            payment_method_types=["card"],
            line_items=[{"price": i.stripe_price_id, "quantity": i.quantity} for i in items],
            mode="payment",
            success_url=f"{origin}/checkout?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{origin}/cart",
        )
        return {"session_id": session.id, "url": session.url}

    def retrieve_checkout_session(self, session_id: str) -> Dict[str, Any]:
        self._require_key()
        session = self._call(stripe.checkout.Session.retrieve, session_id, expand=SESSION_EXPAND)
        return session.to_dict()

    def create_payment_intent(self, items: List[PaymentItemIn]) -> Dict[str, Any]:
        total = sum((i.unit_price * i.quantity for i in items), Decimal("0"))
        if total <= 0:
            raise CheckoutError("Total amount must be greater than zero")
        self._require_key()

        amount = to_cents(total)
        logger.info(f"Creating payment intent for {amount} {self.currency} cents")
        intent = self._call(
            stripe.PaymentIntent.create,
            amount=amount,
            currency=self.currency,
            automatic_payment_methods={"enabled": True},
        )
        return {"client_secret": intent.client_secret}

    def _call(self, fn, *args, **kwargs):
        try:
            return self._send(fn, *args, api_key=self.api_key, **kwargs)
        except stripe.StripeError as e:
            logger.error(f"Stripe error: {e}")
            raise PaymentGatewayError(getattr(e, "user_message", None) or str(e) or "Stripe error")

    @stripe_retry()
    def _send(self, fn, *args, **kwargs):
        return fn(*args, **kwargs)
