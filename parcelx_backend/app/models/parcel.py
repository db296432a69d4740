"""
Parcel database model.

Parcels are submitted by users, assigned to riders, delivered and paid for.
"""

from sqlalchemy import Column, String, Float, DateTime, Enum, JSON, Index
from parcelx_backend.app.db.session import Base, new_id, utcnow
from parcelx_backend.app.models.parcel_enums import ParcelStatus, PaymentStatus


class Parcel(Base):
    """
    Parcel model for the delivery platform.

    Fields the service queries or computes on are columns. Everything else the
    client submitted (titles, sender/receiver contact data, weights, ...) lives
    in ``details`` and is merged back by ``to_document``.
    """
    __tablename__ = "parcels"

    id = Column(String(32), primary_key=True, default=new_id)

    # Ownership
    created_by_email = Column(String(255), nullable=True, index=True)

    # Identification
    tracking_id = Column(String(100), nullable=True, index=True)

    # Status
    status = Column(Enum(ParcelStatus, name="parcel_status"), default=ParcelStatus.PENDING, nullable=False)
    payment_status = Column(
        Enum(PaymentStatus, name="payment_status"), default=PaymentStatus.UNPAID, nullable=False
    )

    # Delivery and earnings
    delivery_cost = Column(Float, nullable=True)
    sender_district = Column(String(100), nullable=True)
    receiver_district = Column(String(100), nullable=True)
    rider_district = Column(String(100), nullable=True)
    rider_earning = Column(Float, nullable=True)

    # Rider assignment (denormalized copies, no foreign key)
    assigned_rider_id = Column(String(64), nullable=True)
    assigned_rider_name = Column(String(255), nullable=True)
    assigned_rider_email = Column(String(255), nullable=True, index=True)
    assigned_at = Column(DateTime(timezone=True), nullable=True)

    details = Column(JSON, nullable=False, default=dict)

    # Timestamps
    created_at_readable = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_parcels_rider_email_updated", "assigned_rider_email", "updated_at"),
    )

    def to_document(self) -> dict:
        document = dict(self.details or {})
        document.update({
            "_id": self.id,
            "createdByEmail": self.created_by_email,
            "trackingId": self.tracking_id,
            "status": self.status.value if self.status else None,
            "paymentStatus": self.payment_status.value if self.payment_status else None,
            "deliveryCost": self.delivery_cost,
            "senderDistrict": self.sender_district,
            "receiverDistrict": self.receiver_district,
            "riderDistrict": self.rider_district,
            "riderEarning": self.rider_earning,
            "assignedRiderId": self.assigned_rider_id,
            "assignedRiderName": self.assigned_rider_name,
            "assignedRiderEmail": self.assigned_rider_email,
            "assignedAt": self.assigned_at,
            "createdAtReadable": self.created_at_readable,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        })
        return document

    def __repr__(self):
        return f"<Parcel(id={self.id}, tracking_id='{self.tracking_id}', status='{self.status.value}')>"
