"""
Parcel Lifecycle Service.

Handles parcel submission, rider assignment, delivery status transitions
(with rider earnings on delivery) and payment confirmation.
Every multi-record change is written in a single transaction.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from parcelx_backend.app.core.exceptions import (
    InvalidArgumentError,
    InvalidStateError,
    ResourceNotFoundError,
)
from parcelx_backend.app.core.payment_gateway import StripePaymentGateway
from parcelx_backend.app.db.session import normalize_id, unit_of_work, utcnow
from parcelx_backend.app.domain.earnings import calculate_rider_earning
from parcelx_backend.app.models.parcel import Parcel
from parcelx_backend.app.models.parcel_enums import ParcelStatus, PaymentStatus
from parcelx_backend.app.models.payment import Payment
from parcelx_backend.app.models.rider import Rider
from parcelx_backend.app.schemas.parcel import ParcelCreate

logger = logging.getLogger(__name__)

# Keys the client may not set through the free-form part of a parcel
RESERVED_KEYS = {"_id", "id"}


def parse_parcel_status(value: Optional[str]) -> ParcelStatus:
    if not value:
        raise InvalidArgumentError("Status is required")
    try:
        return ParcelStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in ParcelStatus)
        raise InvalidArgumentError(f"Invalid status '{value}'. Allowed: {allowed}")


def parse_payment_status(value: Optional[str]) -> PaymentStatus:
    try:
        return PaymentStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in PaymentStatus)
        raise InvalidArgumentError(f"Invalid paymentStatus '{value}'. Allowed: {allowed}")


def readable_timestamp(now) -> str:
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def payment_recorded(db: AsyncSession, payment_intent_id: str) -> bool:
    """Whether a payment row already exists for this intent."""
    existing = await db.scalar(
        select(Payment.id).where(Payment.payment_intent_id == payment_intent_id)
    )
    return existing is not None


class ParcelLifecycleService:

    @staticmethod
    async def create(db: AsyncSession, parcel_data: ParcelCreate, creator: Dict[str, Any]) -> Parcel:
        """
        Store a submitted parcel.

        Defaults: paymentStatus Unpaid, status Pending, createdByEmail from the
        verified token. Undeclared fields are kept verbatim in ``details``.

        Args:
            db: Database session
            parcel_data: Submitted parcel
            creator: Verified identity claims of the caller

        Returns:
            Created parcel
        """
        fields = parcel_data.model_dump(exclude_unset=True, include=set(ParcelCreate.model_fields))
        details = {
            key: value for key, value in (parcel_data.model_extra or {}).items()
            if key not in RESERVED_KEYS
        }

        status = parse_parcel_status(fields["status"]) if fields.get("status") else ParcelStatus.PENDING
        payment_status = (
            parse_payment_status(fields["payment_status"]) if fields.get("payment_status")
            else PaymentStatus.UNPAID
        )

        now = utcnow()
        parcel = Parcel(
            created_by_email=fields.get("created_by_email") or creator.get("email"),
            tracking_id=fields.get("tracking_id"),
            status=status,
            payment_status=payment_status,
            delivery_cost=fields.get("delivery_cost"),
            sender_district=fields.get("sender_district"),
            receiver_district=fields.get("receiver_district"),
            rider_district=fields.get("rider_district"),
            details=details,
            created_at_readable=fields.get("created_at_readable") or readable_timestamp(now),
            created_at=now,
            updated_at=now,
        )

        db.add(parcel)
        await db.commit()
        await db.refresh(parcel)

        logger.info("Parcel %s created by %s", parcel.id, parcel.created_by_email)
        return parcel

    @staticmethod
    async def get_by_id(db: AsyncSession, parcel_id: str) -> Parcel:
        key = normalize_id(parcel_id)
        parcel = await db.get(Parcel, key) if key else None
        if not parcel:
            raise ResourceNotFoundError("Parcel", parcel_id)
        return parcel

    @staticmethod
    async def list_for_creator(db: AsyncSession, email: Optional[str] = None) -> List[Parcel]:
        """Parcels submitted by ``email`` (all parcels when None), newest first."""
        query = select(Parcel)
        if email:
            query = query.where(Parcel.created_by_email == email)
        result = await db.execute(query.order_by(Parcel.created_at.desc()))
        return list(result.scalars().all())

    @staticmethod
    async def assign_rider(
        db: AsyncSession,
        parcel_id: str,
        rider_id: Optional[str],
        rider_name: Optional[str],
        rider_email: Optional[str] = None,
        rider_district: Optional[str] = None
    ) -> Tuple[int, int]:
        """
        Assign a rider to a parcel and put the parcel In-Transit.

        Both the parcel update and the rider bookkeeping update are always
        issued, in one transaction; a parcel that does not exist does not stop
        the rider update. The rider's district is copied onto the parcel for
        the earning calculation, from the request or else from the rider record.

        Returns:
            (parcels matched, riders matched)
        """
        if not rider_id or not rider_name:
            raise InvalidArgumentError("Rider ID and Name required")

        parcel_key = normalize_id(parcel_id)
        if parcel_key is None:
            raise InvalidArgumentError("Invalid parcel ID")
        rider_key = normalize_id(rider_id)
        if rider_key is None:
            raise InvalidArgumentError("Invalid rider ID")

        now = utcnow()
        async with unit_of_work(db):
            if rider_district is None:
                rider_district = await db.scalar(select(Rider.district).where(Rider.id == rider_key))

            parcel_values = dict(
                assigned_rider_id=rider_key,
                assigned_rider_name=rider_name,
                assigned_rider_email=rider_email,
                status=ParcelStatus.IN_TRANSIT,
                assigned_at=now,
                updated_at=now,
            )
            if rider_district:
                parcel_values["rider_district"] = rider_district

            parcel_result = await db.execute(
                update(Parcel).where(Parcel.id == parcel_key).values(**parcel_values)
            )
            rider_result = await db.execute(
                update(Rider).where(Rider.id == rider_key).values(
                    work_status="Delivery",
                    last_assigned_parcel=parcel_key,
                    last_assigned_at=now,
                )
            )

        if parcel_result.rowcount == 0:
            logger.warning("Rider %s assigned to unknown parcel %s", rider_key, parcel_key)
        if rider_result.rowcount == 0:
            logger.warning("Parcel %s assigned to unknown rider %s", parcel_key, rider_key)
        return parcel_result.rowcount, rider_result.rowcount

    @staticmethod
    async def set_status(db: AsyncSession, parcel_id: str, new_status: Optional[str]) -> Parcel:
        """
        Move a parcel to ``new_status``.

        Entering Delivered also stores the rider's earning for the parcel.
        """
        key = normalize_id(parcel_id)
        if key is None:
            raise InvalidArgumentError("Invalid parcel ID")
        status = parse_parcel_status(new_status)

        parcel = await db.get(Parcel, key)
        if not parcel:
            raise ResourceNotFoundError("Parcel", parcel_id)

        async with unit_of_work(db):
            parcel.status = status
            parcel.updated_at = utcnow()
            if status is ParcelStatus.DELIVERED:
                parcel.rider_earning = calculate_rider_earning(
                    parcel.delivery_cost, parcel.rider_district, parcel.receiver_district
                )

        logger.info("Parcel %s status set to %s", key, status.value)
        return parcel

    @staticmethod
    async def confirm_payment(
        db: AsyncSession,
        gateway: StripePaymentGateway,
        parcel_id: Optional[str],
        payment_intent_id: Optional[str]
    ) -> Parcel:
        """
        Mark a parcel Paid once its payment intent has succeeded.

        The parcel is matched by its canonical id or by the literal id string.
        A payment record is written alongside, once per intent.

        Raises:
            InvalidArgumentError: missing parcel or intent id
            InvalidStateError: the intent has not succeeded
            ResourceNotFoundError: no such parcel
        """
        if not parcel_id or not payment_intent_id:
            raise InvalidArgumentError("parcelId and paymentIntentId are required")

        intent = await gateway.retrieve_intent(payment_intent_id)
        if not intent.succeeded:
            raise InvalidStateError("PaymentIntent not succeeded", details={"status": intent.status})

        candidates = {parcel_id}
        canonical = normalize_id(parcel_id)
        if canonical:
            candidates.add(canonical)

        result = await db.execute(select(Parcel).where(Parcel.id.in_(candidates)))
        parcel = result.scalars().first()
        if not parcel:
            raise ResourceNotFoundError("Parcel", parcel_id)

        parcel_key = parcel.id
        now = utcnow()
        try:
            async with unit_of_work(db):
                parcel.payment_status = PaymentStatus.PAID
                parcel.updated_at = now

                if not await payment_recorded(db, intent.id):
                    db.add(Payment(
                        payer_email=intent.metadata.get("payerEmail") or parcel.created_by_email,
                        payment_intent_id=intent.id,
                        parcel_id=parcel_key,
                        amount=intent.amount,
                        currency=intent.currency,
                        created_at=now,
                    ))
        except IntegrityError:
            # A concurrent confirm recorded the same intent first
            logger.warning("Payment for intent %s already recorded; marking parcel %s Paid only",
                           intent.id, parcel_key)
            async with unit_of_work(db):
                await db.execute(
                    update(Parcel).where(Parcel.id == parcel_key).values(
                        payment_status=PaymentStatus.PAID,
                        updated_at=now,
                    )
                )
            await db.refresh(parcel)

        logger.info("Parcel %s marked Paid (intent %s)", parcel_key, intent.id)
        return parcel
