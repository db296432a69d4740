"""
Shared Pydantic building blocks.

Request and response bodies use camelCase keys on the wire.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema with camelCase aliases; snake_case names are accepted too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    success: bool = True
    message: str


class DocumentResponse(BaseModel):
    """Single record response."""
    success: bool = True
    message: Optional[str] = None
    data: Dict[str, Any]


class DocumentListResponse(BaseModel):
    """List of records with their count."""
    success: bool = True
    total: int
    data: List[Dict[str, Any]]


class CountedListResponse(BaseModel):
    """List of records with a ``count`` field (rider-facing lists)."""
    success: bool = True
    count: int
    data: List[Dict[str, Any]]
