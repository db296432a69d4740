"""
Payment intents and payment history.
"""

import logging
from typing import Any, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from parcelx_backend.app.core.exceptions import InvalidArgumentError
from parcelx_backend.app.core.payment_gateway import PaymentIntentRecord, StripePaymentGateway
from parcelx_backend.app.models.payment import Payment

logger = logging.getLogger(__name__)


def parse_amount(value: Any) -> int:
    """
    Accept a positive whole number of minor units (int, integral float or numeric string).

    Raises:
        InvalidArgumentError: for anything else
    """
    if value is None or isinstance(value, bool):
        raise InvalidArgumentError("Invalid amountInCents")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError("Invalid amountInCents")
    if not amount.is_integer() or amount <= 0:
        raise InvalidArgumentError("Invalid amountInCents")
    return int(amount)


async def create_payment_intent(
    gateway: StripePaymentGateway,
    amount_in_cents: Any,
    parcel_id: Optional[str] = None,
    payer_email: Optional[str] = None
) -> PaymentIntentRecord:
    """Open a payment intent for a parcel; the client settles it with the returned secret."""
    amount = parse_amount(amount_in_cents)
    intent = await gateway.create_intent(
        amount,
        metadata={"parcelId": parcel_id or "", "payerEmail": payer_email or ""},
    )
    logger.info("Payment intent %s created for parcel %s", intent.id, parcel_id)
    return intent


async def list_payments(db: AsyncSession, email: Optional[str]) -> List[Payment]:
    """Payments made by ``email``, newest first."""
    if not email:
        raise InvalidArgumentError("Email is required")

    result = await db.execute(
        select(Payment).where(Payment.payer_email == email).order_by(Payment.created_at.desc())
    )
    return list(result.scalars().all())
