"""
User roles enumeration.

Defines the role types for the ParcelX system.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        USER: Default role for anyone who signs in
        ADMIN: Manages users, riders and parcels
        RIDER: Approved delivery courier
    """
    USER = "user"
    ADMIN = "admin"
    RIDER = "rider"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value == key:
                    return member
        return None
