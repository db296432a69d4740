"""
Tracking lookup response schema.
"""

from typing import Any, Dict, List

from pydantic import BaseModel


class TrackingResponse(BaseModel):
    success: bool = True
    parcel: Dict[str, Any]
    history: List[Dict[str, Any]]
