"""
Rider database model.

A rider applies, gets approved (or rejected) by an admin, and is then
assigned parcels.
"""

from sqlalchemy import Column, String, DateTime, Enum, JSON
from parcelx_backend.app.db.session import Base, new_id, utcnow
from parcelx_backend.app.models.rider_enums import RiderStatus


class Rider(Base):
    """
    Rider model.

    Linked to a ``User`` only through the email copy; approval changes the
    linked user's role.
    """
    __tablename__ = "riders"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True, index=True)
    district = Column(String(100), nullable=True, index=True)

    status = Column(Enum(RiderStatus, name="rider_status"), default=RiderStatus.PENDING, nullable=False, index=True)
    work_status = Column(String(50), nullable=True)
    last_assigned_parcel = Column(String(64), nullable=True)
    last_assigned_at = Column(DateTime(timezone=True), nullable=True)

    # Application form fields (phone, NID, bike details, ...)
    details = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def to_document(self) -> dict:
        document = dict(self.details or {})
        document.update({
            "_id": self.id,
            "name": self.name,
            "email": self.email,
            "district": self.district,
            "status": self.status.value if self.status else None,
            "workStatus": self.work_status,
            "lastAssignedParcel": self.last_assigned_parcel,
            "lastAssignedAt": self.last_assigned_at,
            "createdAt": self.created_at,
        })
        return document

    def __repr__(self):
        return f"<Rider(id={self.id}, email='{self.email}', status='{self.status.value}')>"
