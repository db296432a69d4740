"""
Payment Pydantic schemas.
"""

from typing import Any, Optional

from parcelx_backend.app.schemas.common import CamelModel


class PaymentIntentCreate(CamelModel):
    """
    Body of POST /create-payment-intent.

    ``amount_in_cents`` is checked by the service (positive integer), so any
    JSON value is accepted here.
    """
    amount_in_cents: Any = None
    parcel_id: Optional[str] = None
    payer_email: Optional[str] = None


class PaymentIntentResponse(CamelModel):
    client_secret: Optional[str]


class PaymentConfirm(CamelModel):
    """Body of POST /payments/confirm."""
    parcel_id: Optional[str] = None
    payment_intent_id: Optional[str] = None
