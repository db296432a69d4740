"""
Database seeding script for the initial admin.

Creates the ADMIN user record so the first admin can reach the dashboard.
The identity itself must already exist at the identity provider; only the
directory record and its role are created here.

Usage:
    python -m parcelx_backend.seed_users [admin-email]
"""

import asyncio
import sys

from sqlalchemy import select

from parcelx_backend.app.core.config import settings
from parcelx_backend.app.db.session import Database, utcnow
from parcelx_backend.app.models.enums import UserRole
from parcelx_backend.app.models.user import User

DEFAULT_ADMIN_EMAIL = "admin@parcelx.com"


async def seed_users(email: str = DEFAULT_ADMIN_EMAIL):
    """
    Seed the admin user.

    An existing user with the same email is promoted to admin instead.
    """
    database = Database.from_settings(settings)
    await database.create_all()
    try:
        async with database.session_factory() as db:
            print("🌱 Starting user seeding...")

            result = await db.execute(select(User).where(User.email == email))
            existing = result.scalar_one_or_none()

            if existing and existing.role == UserRole.ADMIN:
                print(f"ℹ️  ADMIN user {email} already exists, skipping seeding")
                return

            if existing:
                existing.role = UserRole.ADMIN
                print(f"✅ Promoted {email} to ADMIN")
            else:
                db.add(User(
                    email=email,
                    name="Admin",
                    provider="email",
                    role=UserRole.ADMIN,
                    created_at=utcnow(),
                ))
                print(f"✅ Created ADMIN user ({email})")

            await db.commit()
            print("\n🎉 User seeding completed successfully!")
            print("\nNote: regular users are created on their first sign-in via POST /users")
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(seed_users(*sys.argv[1:2]))
