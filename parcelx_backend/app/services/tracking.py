"""
Tracking lookup service.
"""

from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from parcelx_backend.app.core.exceptions import InvalidArgumentError, ResourceNotFoundError
from parcelx_backend.app.models.parcel import Parcel
from parcelx_backend.app.models.tracking_event import TrackingEvent


async def get_tracking(db: AsyncSession, tracking_id: Optional[str]) -> Tuple[Parcel, List[TrackingEvent]]:
    """
    Find a parcel by tracking id together with its event history.

    Returns:
        (parcel, events ordered by time ascending; may be empty)
    """
    tracking_id = (tracking_id or "").strip()
    if not tracking_id:
        raise InvalidArgumentError("Tracking ID is required")

    result = await db.execute(select(Parcel).where(Parcel.tracking_id == tracking_id).limit(1))
    parcel = result.scalar_one_or_none()
    if not parcel:
        raise ResourceNotFoundError("Parcel")

    events = await db.execute(
        select(TrackingEvent).where(TrackingEvent.parcel_id == parcel.id).order_by(TrackingEvent.time.asc())
    )
    return parcel, list(events.scalars().all())
