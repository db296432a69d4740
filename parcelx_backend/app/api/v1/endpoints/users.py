"""
User Directory API Endpoints.

Login upsert, search, role lookup and role management.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from parcelx_backend.app.core.dependencies import get_current_user
from parcelx_backend.app.db.session import get_db
from parcelx_backend.app.schemas.common import MessageResponse
from parcelx_backend.app.schemas.user import (
    RoleUpdate,
    UserListResponse,
    UserLogin,
    UserPublic,
    UserResponse,
    UserRoleProfile,
    UserRoleResponse,
    UserSearchResponse,
)
from parcelx_backend.app.services import user_directory

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    response_model=MessageResponse,
    responses={201: {"model": MessageResponse, "description": "User created"}},
)
async def upsert_user(
    identity: UserLogin,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    Record a sign-in.

    Creates the user (201) on first login, otherwise refreshes lastLogin (200).
    """
    user, created = await user_directory.upsert_on_login(db, identity)
    if created:
        response.status_code = status.HTTP_201_CREATED
        return MessageResponse(message="User created")
    return MessageResponse(message="User exists, lastLogin refreshed")


@router.get("/search", response_model=UserSearchResponse)
async def search_users(
    query: Optional[str] = Query(None, description="Part of an email or name"),
    db: AsyncSession = Depends(get_db)
):
    """Search users by email or name (max 10 results)."""
    users = await user_directory.search_users(db, query)
    return UserSearchResponse(
        total=len(users),
        data=[UserPublic.model_validate(u.to_document()) for u in users]
    )


@router.patch("/{user_id}/role", response_model=MessageResponse)
async def update_user_role(
    user_id: str = Path(..., description="User ID"),
    body: RoleUpdate = Body(...),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Change a user's role (authenticated)."""
    role = await user_directory.set_role(db, user_id, body.role)
    return MessageResponse(message=f"User role updated to '{role.value}'.")


@router.get("/role", response_model=UserRoleResponse)
async def get_user_role(
    email: Optional[str] = Query(None, description="User email"),
    db: AsyncSession = Depends(get_db)
):
    """Get the role of the user with this email."""
    role, user = await user_directory.get_role(db, email)
    return UserRoleResponse(
        role=role.value,
        data=UserRoleProfile.model_validate(user.to_document())
    )


@router.get("", response_model=UserListResponse)
async def list_users(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List all users, newest first (authenticated)."""
    users = await user_directory.list_all(db)
    return UserListResponse(
        total=len(users),
        data=[UserResponse.model_validate(u.to_document()) for u in users]
    )
