"""
User directory Pydantic schemas.

Defines request and response schemas for the /users endpoints.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from parcelx_backend.app.schemas.common import CamelModel


class UserLogin(CamelModel):
    """
    Identity record sent by the client after every sign-in.

    Used by POST /users. Email is validated by the service so a missing email
    is a 400, not a schema error. Absent or null profile fields get their
    defaults when the user is created.
    """
    uid: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    image: Optional[str] = None
    role: Optional[str] = None
    provider: Optional[str] = None


class RoleUpdate(CamelModel):
    """Body of PATCH /users/{id}/role."""
    role: Optional[str] = None


class UserResponse(CamelModel):
    """Full user record (protected listing)."""
    id: str = Field(..., alias="_id")
    uid: Optional[str] = None
    email: str
    name: str = ""
    image: str = ""
    provider: str = "email"
    role: str = "user"
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None


class UserPublic(CamelModel):
    """Public-safe projection returned by search."""
    id: str = Field(..., alias="_id")
    uid: Optional[str] = None
    email: str
    name: str = ""
    role: str = "user"
    created_at: Optional[datetime] = None


class UserListResponse(BaseModel):
    success: bool = True
    total: int
    data: List[UserResponse]


class UserSearchResponse(BaseModel):
    success: bool = True
    total: int
    data: List[UserPublic]


class UserRoleProfile(CamelModel):
    name: str = ""
    email: str
    role: Optional[str] = None
    created_at: Optional[datetime] = None


class UserRoleResponse(BaseModel):
    """Response of GET /users/role."""
    success: bool = True
    role: str
    data: UserRoleProfile
    message: str = "User role fetched successfully."
