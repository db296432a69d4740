"""
User database model.

One record per identity (email). Created or refreshed on every login.
"""

from sqlalchemy import Column, String, DateTime, Enum
from parcelx_backend.app.db.session import Base, new_id, utcnow
from parcelx_backend.app.models.enums import UserRole


class User(Base):
    """
    User model for the identity directory.

    The identity itself is owned by the external provider; this record keeps
    the profile and the role used by the dashboard.
    """
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    uid = Column(String(128), nullable=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False, default="")
    image = Column(String(1024), nullable=False, default="")
    provider = Column(String(50), nullable=False, default="email")

    role = Column(Enum(UserRole, name="user_role"), default=UserRole.USER, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    last_login = Column(DateTime(timezone=True), nullable=True)

    def to_document(self) -> dict:
        return {
            "_id": self.id,
            "uid": self.uid,
            "email": self.email,
            "name": self.name,
            "image": self.image,
            "provider": self.provider,
            "role": (self.role or UserRole.USER).value,
            "createdAt": self.created_at,
            "lastLogin": self.last_login,
        }

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role.value if self.role else None}')>"
