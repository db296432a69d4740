"""
Rider directory and approval workflow.

Riders apply (pending), get approved (active) or rejected by an admin, can
be moved back to pending, and see their delivery tasks. Approval changes
also update the role of the rider's user account.
"""

import logging
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from parcelx_backend.app.core.exceptions import InvalidArgumentError, ResourceNotFoundError
from parcelx_backend.app.db.session import normalize_id, unit_of_work, utcnow
from parcelx_backend.app.models.parcel import Parcel
from parcelx_backend.app.models.parcel_enums import ParcelStatus
from parcelx_backend.app.models.rider import Rider
from parcelx_backend.app.models.rider_enums import RiderStatus
from parcelx_backend.app.models.user import User
from parcelx_backend.app.schemas.rider import RiderCreate

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    RiderStatus.ACTIVE: "Rider activated and role updated to rider.",
    RiderStatus.PENDING: "Rider deactivated and moved to pending list.",
    RiderStatus.REJECTED: "Rider rejected and role reverted to user.",
}

OPEN_TASK_STATUSES = (ParcelStatus.IN_TRANSIT, ParcelStatus.PENDING)


def parse_rider_status(value: Optional[str]) -> RiderStatus:
    try:
        return RiderStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in RiderStatus)
        raise InvalidArgumentError(f"Invalid rider status '{value}'. Allowed: {allowed}")


async def register(db: AsyncSession, rider_data: RiderCreate) -> Rider:
    """Store a rider application as submitted; status defaults to pending."""
    fields = rider_data.model_dump(exclude_unset=True, include=set(RiderCreate.model_fields))
    details = {
        key: value for key, value in (rider_data.model_extra or {}).items()
        if key not in ("_id", "id")
    }

    rider = Rider(
        name=fields.get("name"),
        email=fields.get("email"),
        district=fields.get("district"),
        status=parse_rider_status(fields["status"]) if fields.get("status") else RiderStatus.PENDING,
        details=details,
        created_at=utcnow(),
    )
    db.add(rider)
    await db.commit()
    await db.refresh(rider)

    logger.info("Rider application %s registered for %s", rider.id, rider.email)
    return rider


async def list_by_status(db: AsyncSession, status: RiderStatus) -> List[Rider]:
    result = await db.execute(
        select(Rider).where(Rider.status == status).order_by(Rider.created_at.desc())
    )
    return list(result.scalars().all())


async def list_pending(db: AsyncSession) -> List[Rider]:
    return await list_by_status(db, RiderStatus.PENDING)


async def list_active(db: AsyncSession) -> List[Rider]:
    return await list_by_status(db, RiderStatus.ACTIVE)


async def set_status(db: AsyncSession, rider_id: str, status: Optional[str], email: Optional[str]) -> RiderStatus:
    """
    Move a rider to ``status`` and align the linked user's role.

    The role update is best effort: when no user has ``email`` the rider
    status still changes and a warning is logged.

    Raises:
        InvalidArgumentError: malformed id, missing email/status, unknown status
        ResourceNotFoundError: no such rider
    """
    key = normalize_id(rider_id)
    if key is None:
        raise InvalidArgumentError("Invalid Rider ID")
    if not email or not status:
        raise InvalidArgumentError("Missing email or status")
    new_status = parse_rider_status(status)

    async with unit_of_work(db):
        rider = await db.get(Rider, key)
        if rider is None:
            raise ResourceNotFoundError("Rider", rider_id)
        rider.status = new_status

        user_result = await db.execute(
            update(User).where(User.email == email).values(role=new_status.linked_user_role)
        )
        if user_result.rowcount == 0:
            logger.warning("No user found for email %s; rider %s updated without role change", email, key)

    logger.info("Rider %s moved to %s", key, new_status.value)
    return new_status


async def list_by_district(db: AsyncSession, district: Optional[str]) -> List[Rider]:
    """Active riders whose district contains ``district`` (case-insensitive)."""
    term = (district or "").strip()
    if not term:
        raise InvalidArgumentError("District is required")

    result = await db.execute(
        select(Rider).where(
            Rider.district.icontains(term, autoescape=True),
            Rider.status == RiderStatus.ACTIVE,
        )
    )
    return list(result.scalars().all())


async def list_tasks(db: AsyncSession, email: Optional[str]) -> List[Parcel]:
    """Parcels assigned to the rider that are still Pending or In-Transit."""
    if not email:
        raise InvalidArgumentError("Email is required")

    result = await db.execute(
        select(Parcel).where(
            Parcel.assigned_rider_email == email,
            Parcel.status.in_(OPEN_TASK_STATUSES),
        ).order_by(Parcel.updated_at.desc())
    )
    return list(result.scalars().all())


async def list_completed(db: AsyncSession, email: Optional[str]) -> List[Parcel]:
    """Parcels the rider has delivered, most recent first."""
    if not email:
        raise InvalidArgumentError("Email is required")

    result = await db.execute(
        select(Parcel).where(
            Parcel.assigned_rider_email == email,
            Parcel.status == ParcelStatus.DELIVERED,
        ).order_by(Parcel.updated_at.desc())
    )
    return list(result.scalars().all())
