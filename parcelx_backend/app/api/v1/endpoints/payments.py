"""
Payment API Endpoints.

Payment intent creation, payment confirmation and payment history.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from parcelx_backend.app.core.dependencies import get_payment_gateway
from parcelx_backend.app.core.payment_gateway import StripePaymentGateway
from parcelx_backend.app.db.session import get_db
from parcelx_backend.app.schemas.common import DocumentListResponse, MessageResponse
from parcelx_backend.app.schemas.payment import PaymentConfirm, PaymentIntentCreate, PaymentIntentResponse
from parcelx_backend.app.services import payments
from parcelx_backend.app.services.parcel_lifecycle import ParcelLifecycleService

router = APIRouter(tags=["Payments"])


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    body: PaymentIntentCreate,
    gateway: StripePaymentGateway = Depends(get_payment_gateway)
):
    """Create a payment intent and return its client secret."""
    intent = await payments.create_payment_intent(
        gateway, body.amount_in_cents, body.parcel_id, body.payer_email
    )
    return PaymentIntentResponse(client_secret=intent.client_secret)


@router.post("/payments/confirm", response_model=MessageResponse)
async def confirm_payment(
    body: PaymentConfirm,
    gateway: StripePaymentGateway = Depends(get_payment_gateway),
    db: AsyncSession = Depends(get_db)
):
    """Mark the parcel Paid once the payment intent has succeeded."""
    await ParcelLifecycleService.confirm_payment(db, gateway, body.parcel_id, body.payment_intent_id)
    return MessageResponse(message="Payment recorded and parcel marked Paid")


@router.get("/payments", response_model=DocumentListResponse)
async def list_payments(
    email: Optional[str] = Query(None, description="Payer email"),
    db: AsyncSession = Depends(get_db)
):
    records = await payments.list_payments(db, email)
    return DocumentListResponse(total=len(records), data=[p.to_document() for p in records])
