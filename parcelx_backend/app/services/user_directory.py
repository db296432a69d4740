"""
User directory service.

Keeps one record per signed-in identity and the role that gates the
dashboard (user, admin, rider).
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import select, update, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from parcelx_backend.app.core.exceptions import ConflictError, InvalidArgumentError, ResourceNotFoundError
from parcelx_backend.app.db.session import normalize_id, utcnow
from parcelx_backend.app.models.enums import UserRole
from parcelx_backend.app.models.user import User
from parcelx_backend.app.schemas.user import UserLogin

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 10
DEFAULT_PROVIDER = "email"


def parse_role(role: Optional[str]) -> UserRole:
    """
    Normalize a role name (case-insensitive).

    Raises:
        InvalidArgumentError: if the role is missing or unknown
    """
    if not role:
        raise InvalidArgumentError("Role is required.")
    try:
        return UserRole(role)
    except ValueError:
        allowed = ", ".join(r.value for r in UserRole)
        raise InvalidArgumentError(f"Invalid role. Allowed: {allowed}")


async def upsert_on_login(db: AsyncSession, identity: UserLogin) -> Tuple[User, bool]:
    """
    Create the user on first login, otherwise refresh ``last_login``.

    Args:
        db: Database session
        identity: Profile sent by the client after sign-in

    Returns:
        (user, created)

    Raises:
        InvalidArgumentError: if email is missing
        ConflictError: if a concurrent login inserted the same email first
    """
    if not identity.email or not identity.email.strip():
        raise InvalidArgumentError("Email is required")

    now = utcnow()
    result = await db.execute(select(User).where(User.email == identity.email))
    user = result.scalar_one_or_none()

    if user:
        user.last_login = now
        await db.commit()
        return user, False

    role = parse_role(identity.role) if identity.role else UserRole.USER
    user = User(
        uid=identity.uid,
        email=identity.email,
        name=identity.name or "",
        image=identity.image or "",
        provider=identity.provider or DEFAULT_PROVIDER,
        role=role,
        created_at=now,
        last_login=now,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning("Duplicate user insert for %s", identity.email)
        raise ConflictError("User already exists", details={"email": identity.email})

    await db.refresh(user)
    logger.info("Created user %s (%s)", user.email, user.role.value)
    return user, True


async def search_users(db: AsyncSession, query: Optional[str]) -> List[User]:
    """Case-insensitive substring search on email or name, at most 10 hits."""
    term = (query or "").strip()
    if not term:
        raise InvalidArgumentError("Search query required.")

    result = await db.execute(
        select(User).where(
            or_(
                User.email.icontains(term, autoescape=True),
                User.name.icontains(term, autoescape=True),
            )
        ).order_by(User.created_at.desc()).limit(SEARCH_LIMIT)
    )
    return list(result.scalars().all())


async def set_role(db: AsyncSession, user_id: str, role: Optional[str]) -> UserRole:
    """
    Change a user's role.

    Raises:
        InvalidArgumentError: malformed id, missing or unknown role
        ResourceNotFoundError: no user with that id
    """
    key = normalize_id(user_id)
    if key is None:
        raise InvalidArgumentError("Invalid user ID.")
    new_role = parse_role(role)

    result = await db.execute(update(User).where(User.id == key).values(role=new_role))
    if result.rowcount == 0:
        await db.rollback()
        raise ResourceNotFoundError("User", user_id)

    await db.commit()
    logger.info("User %s role set to %s", key, new_role.value)
    return new_role


async def get_role(db: AsyncSession, email: Optional[str]) -> Tuple[UserRole, User]:
    """
    Return the role of the user with this email (defaults to user) and the record.
    """
    if not email:
        raise InvalidArgumentError("Email is required.")

    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if not user:
        raise ResourceNotFoundError("User")
    return user.role or UserRole.USER, user


async def list_all(db: AsyncSession) -> List[User]:
    """All users, newest first."""
    result = await db.execute(select(User).order_by(User.created_at.desc()))
    return list(result.scalars().all())
