"""
Rider Pydantic schemas.
"""

from typing import Optional

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

from parcelx_backend.app.schemas.common import CamelModel


class RiderCreate(CamelModel):
    """
    Rider application.

    Declared fields are the ones the workflow queries on; the rest of the
    application form is stored verbatim.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    name: Optional[str] = None
    email: Optional[str] = None
    district: Optional[str] = None
    status: Optional[str] = None


class RiderStatusUpdate(CamelModel):
    """Body of PATCH /riders/{id}."""
    status: Optional[str] = None
    email: Optional[str] = None


class RiderCreatedResponse(CamelModel):
    success: bool = True
    message: str = "Rider added successfully"
    inserted_id: str
