"""
Public parcel tracking endpoint.
"""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from parcelx_backend.app.db.session import get_db
from parcelx_backend.app.schemas.tracking import TrackingResponse
from parcelx_backend.app.services.tracking import get_tracking

router = APIRouter(prefix="/tracking", tags=["Tracking"])


@router.get("/{tracking_id}", response_model=TrackingResponse)
async def track_parcel(
    tracking_id: str = Path(..., description="Tracking ID printed on the parcel"),
    db: AsyncSession = Depends(get_db)
):
    """Parcel details with its tracking history (oldest event first)."""
    parcel, events = await get_tracking(db, tracking_id)
    return TrackingResponse(
        parcel=parcel.to_document(),
        history=[event.to_document() for event in events]
    )
