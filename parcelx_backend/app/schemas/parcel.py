"""
Parcel Pydantic schemas.

Defines request models for parcel submission and lifecycle updates.
"""

from typing import Any, Dict, Optional

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

from parcelx_backend.app.schemas.common import CamelModel


class ParcelCreate(CamelModel):
    """
    Schema for submitting a parcel.

    Only the fields the service works with are declared; any other field the
    client sends is kept as-is on the parcel.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    tracking_id: Optional[str] = None
    created_by_email: Optional[str] = None
    status: Optional[str] = None
    payment_status: Optional[str] = None
    delivery_cost: Optional[float] = None
    sender_district: Optional[str] = None
    receiver_district: Optional[str] = None
    rider_district: Optional[str] = None
    created_at_readable: Optional[str] = None


class RiderAssignment(CamelModel):
    """Body of PATCH /parcels/{id}/assign."""
    rider_id: Optional[str] = None
    rider_name: Optional[str] = None
    rider_email: Optional[str] = None
    rider_district: Optional[str] = None


class ParcelStatusUpdate(CamelModel):
    """Body of PATCH /parcels/{id}/status."""
    status: Optional[str] = None


class AssignmentResponse(CamelModel):
    success: bool = True
    message: str
    parcel_modified: int
    rider_modified: int


class ParcelCreatedResponse(CamelModel):
    success: bool = True
    message: str = "Parcel added successfully"
    acknowledged: bool = True
    inserted_id: str
    data: Dict[str, Any]
