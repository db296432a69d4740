"""
Parcel API Endpoints.

Parcel submission and listing, rider assignment and status transitions.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from parcelx_backend.app.core.dependencies import get_current_user
from parcelx_backend.app.db.session import get_db
from parcelx_backend.app.schemas.common import DocumentListResponse, DocumentResponse
from parcelx_backend.app.schemas.parcel import (
    AssignmentResponse,
    ParcelCreate,
    ParcelCreatedResponse,
    ParcelStatusUpdate,
    RiderAssignment,
)
from parcelx_backend.app.services.parcel_lifecycle import ParcelLifecycleService

router = APIRouter(prefix="/parcels", tags=["Parcels"])


@router.get("", response_model=DocumentListResponse)
async def list_parcels(
    email: Optional[str] = Query(None, description="Only parcels created by this email"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List parcels, newest first (authenticated)."""
    parcels = await ParcelLifecycleService.list_for_creator(db, email)
    return DocumentListResponse(total=len(parcels), data=[p.to_document() for p in parcels])


@router.get("/{parcel_id}", response_model=DocumentResponse)
async def get_parcel(
    parcel_id: str = Path(..., description="Parcel ID"),
    db: AsyncSession = Depends(get_db)
):
    parcel = await ParcelLifecycleService.get_by_id(db, parcel_id)
    return DocumentResponse(message="Parcel retrieved successfully", data=parcel.to_document())


@router.post("", response_model=ParcelCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_parcel(
    parcel_data: ParcelCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Submit a parcel (authenticated).

    The parcel starts Pending and Unpaid unless the client says otherwise.
    """
    parcel = await ParcelLifecycleService.create(db, parcel_data, current_user)
    return ParcelCreatedResponse(inserted_id=parcel.id, data=parcel.to_document())


@router.patch("/{parcel_id}/assign", response_model=AssignmentResponse)
async def assign_rider(
    parcel_id: str = Path(..., description="Parcel ID"),
    assignment: RiderAssignment = Body(...),
    db: AsyncSession = Depends(get_db)
):
    """
    Assign a rider and mark the parcel In-Transit.

    Reports how many parcel and rider records were updated.
    """
    parcel_count, rider_count = await ParcelLifecycleService.assign_rider(
        db,
        parcel_id,
        assignment.rider_id,
        assignment.rider_name,
        assignment.rider_email,
        assignment.rider_district,
    )
    return AssignmentResponse(
        message="Rider assigned and parcel marked In-Transit",
        parcel_modified=parcel_count,
        rider_modified=rider_count,
    )


@router.patch("/{parcel_id}/status", response_model=DocumentResponse)
async def update_parcel_status(
    parcel_id: str = Path(..., description="Parcel ID"),
    body: ParcelStatusUpdate = Body(...),
    db: AsyncSession = Depends(get_db)
):
    """Change the delivery status; Delivered also computes the rider's earning."""
    parcel = await ParcelLifecycleService.set_status(db, parcel_id, body.status)
    return DocumentResponse(message="Parcel status updated successfully", data=parcel.to_document())
