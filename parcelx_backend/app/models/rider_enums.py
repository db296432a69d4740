"""
Rider approval status enumeration.
"""

import enum

from parcelx_backend.app.models.enums import UserRole


class RiderStatus(str, enum.Enum):
    """
    Rider approval status.

    Status flow:
        PENDING → ACTIVE | REJECTED
        ACTIVE → PENDING (deactivation)

    Case variants are accepted, and "approved" is an alias of ACTIVE.
    """
    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower()
            if key == "approved":
                return cls.ACTIVE
            for member in cls:
                if member.value == key:
                    return member
        return None

    @property
    def linked_user_role(self) -> UserRole:
        """Role given to the rider's user account when entering this status."""
        return UserRole.RIDER if self is RiderStatus.ACTIVE else UserRole.USER
