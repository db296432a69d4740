"""
Payment processor client (Stripe).

Creates payment intents for the checkout page and reads back their
settlement status when the client confirms a payment.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import stripe
from starlette.concurrency import run_in_threadpool

from parcelx_backend.app.core.config import Settings
from parcelx_backend.app.core.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)

INTENT_SUCCEEDED = "succeeded"


@dataclass
class PaymentIntentRecord:
    """The parts of a processor payment intent this service uses."""
    id: str
    status: str
    client_secret: Optional[str] = None
    amount: Optional[int] = None
    currency: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == INTENT_SUCCEEDED


def _to_record(intent: Any) -> PaymentIntentRecord:
    return PaymentIntentRecord(
        id=intent.id,
        status=intent.status,
        client_secret=getattr(intent, "client_secret", None),
        amount=getattr(intent, "amount", None),
        currency=getattr(intent, "currency", None),
        metadata=dict(getattr(intent, "metadata", None) or {}),
    )


class StripePaymentGateway:
    """Thin async wrapper over the blocking Stripe SDK."""

    def __init__(self, api_key: Optional[str], currency: str = "usd"):
        self.api_key = api_key
        self.currency = currency

    @classmethod
    def from_settings(cls, settings: Settings) -> "StripePaymentGateway":
        if not settings.payment_gateway_key:
            logger.warning("PAYMENT_GATEWAY_KEY is not set; payment calls will fail")
        return cls(settings.payment_gateway_key, currency=settings.payment_currency)

    async def create_intent(self, amount: int, metadata: Dict[str, str]) -> PaymentIntentRecord:
        """
        Create a payment intent for ``amount`` minor units.

        Raises:
            PaymentGatewayError: with the processor's message if Stripe rejects the call
        """
        try:
            intent = await run_in_threadpool(
                stripe.PaymentIntent.create,
                amount=amount,
                currency=self.currency,
                automatic_payment_methods={"enabled": True},
                metadata=metadata,
                api_key=self.api_key,
            )
        except stripe.StripeError as exc:
            logger.error("Stripe rejected payment intent creation: %s", exc.user_message or str(exc))
            raise PaymentGatewayError(exc.user_message or str(exc)) from exc
        return _to_record(intent)

    async def retrieve_intent(self, intent_id: str) -> PaymentIntentRecord:
        """Fetch an intent and its current settlement status."""
        try:
            intent = await run_in_threadpool(
                stripe.PaymentIntent.retrieve, intent_id, api_key=self.api_key
            )
        except stripe.StripeError as exc:
            logger.error("Stripe lookup of payment intent %s failed: %s", intent_id, str(exc))
            raise PaymentGatewayError(exc.user_message or str(exc)) from exc
        return _to_record(intent)
