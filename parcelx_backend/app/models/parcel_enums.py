"""
Parcel Status Enumerations.
"""

import enum


class ParcelStatus(str, enum.Enum):
    """
    Parcel delivery status enumeration.

    Status flow:
        PENDING → IN_TRANSIT → DELIVERED

    Lookup is case-insensitive and treats "_" and " " as "-", so
    "in transit", "IN_TRANSIT" and "In-Transit" all resolve to IN_TRANSIT.
    """
    PENDING = "Pending"
    IN_TRANSIT = "In-Transit"
    DELIVERED = "Delivered"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower().replace("_", "-").replace(" ", "-")
            for member in cls:
                if member.value.lower() == key:
                    return member
        return None


class PaymentStatus(str, enum.Enum):
    """Parcel payment status; orthogonal to the delivery status."""
    UNPAID = "Unpaid"
    PAID = "Paid"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value.lower() == key:
                    return member
        return None
