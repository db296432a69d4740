"""
Rider API Endpoints.

Rider applications, approval workflow, district discovery and rider task lists.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from parcelx_backend.app.db.session import get_db
from parcelx_backend.app.schemas.common import CountedListResponse, MessageResponse
from parcelx_backend.app.schemas.rider import RiderCreate, RiderCreatedResponse, RiderStatusUpdate
from parcelx_backend.app.services import rider_workflow

router = APIRouter(prefix="/riders", tags=["Riders"])


@router.post("", response_model=RiderCreatedResponse, status_code=status.HTTP_201_CREATED)
async def register_rider(
    rider_data: RiderCreate,
    db: AsyncSession = Depends(get_db)
):
    """Submit a rider application."""
    rider = await rider_workflow.register(db, rider_data)
    return RiderCreatedResponse(inserted_id=rider.id)


@router.get("/pending", response_model=List[Dict[str, Any]])
async def list_pending_riders(db: AsyncSession = Depends(get_db)):
    riders = await rider_workflow.list_pending(db)
    return [r.to_document() for r in riders]


@router.get("/active", response_model=List[Dict[str, Any]])
async def list_active_riders(db: AsyncSession = Depends(get_db)):
    riders = await rider_workflow.list_active(db)
    return [r.to_document() for r in riders]


@router.get(
    "/by-district",
    response_model=CountedListResponse,
    responses={404: {"description": "No active riders in that district"}},
)
async def list_riders_by_district(
    district: Optional[str] = Query(None, description="District name or part of it"),
    db: AsyncSession = Depends(get_db)
):
    """
    Active riders for a district.

    An empty match is answered with 404 and an empty list (count 0).
    """
    riders = await rider_workflow.list_by_district(db, district)
    if not riders:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "success": False,
                "message": f"No active riders found for district: {district}",
                "count": 0,
                "data": [],
            },
        )
    return CountedListResponse(count=len(riders), data=[r.to_document() for r in riders])


@router.get("/tasks", response_model=CountedListResponse)
async def list_rider_tasks(
    email: Optional[str] = Query(None, description="Rider email"),
    db: AsyncSession = Depends(get_db)
):
    """Open deliveries (Pending or In-Transit) of a rider."""
    parcels = await rider_workflow.list_tasks(db, email)
    return CountedListResponse(count=len(parcels), data=[p.to_document() for p in parcels])


@router.get("/completed", response_model=CountedListResponse)
async def list_completed_deliveries(
    email: Optional[str] = Query(None, description="Rider email"),
    db: AsyncSession = Depends(get_db)
):
    """Delivered parcels of a rider, newest first."""
    parcels = await rider_workflow.list_completed(db, email)
    return CountedListResponse(count=len(parcels), data=[p.to_document() for p in parcels])


@router.patch("/{rider_id}", response_model=MessageResponse)
async def update_rider_status(
    rider_id: str = Path(..., description="Rider ID"),
    body: RiderStatusUpdate = Body(...),
    db: AsyncSession = Depends(get_db)
):
    """Approve, reject or deactivate a rider; the linked user's role follows."""
    new_status = await rider_workflow.set_status(db, rider_id, body.status, body.email)
    return MessageResponse(message=rider_workflow.STATUS_MESSAGES[new_status])
