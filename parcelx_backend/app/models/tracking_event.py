"""
Tracking Event database model.

Timestamped waypoints of a parcel's delivery progress. Written by the
instrumentation side; read here for the public tracking page.
"""

from sqlalchemy import Column, String, DateTime, JSON, Index
from parcelx_backend.app.db.session import Base, new_id, utcnow


class TrackingEvent(Base):
    """
    Tracking event model.

    ``parcel_id`` is a lookup reference only, not an ownership link.
    """
    __tablename__ = "tracking_events"

    id = Column(String(32), primary_key=True, default=new_id)
    parcel_id = Column(String(64), nullable=False, index=True)
    tracking_id = Column(String(100), nullable=True)
    time = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    status = Column(String(100), nullable=True)
    location = Column(String(255), nullable=True)
    note = Column(String(500), nullable=True)
    details = Column(JSON, nullable=False, default=dict)

    __table_args__ = (
        Index("ix_tracking_events_tracking_id_time", "tracking_id", "time"),
    )

    def to_document(self) -> dict:
        document = dict(self.details or {})
        document.update({
            "_id": self.id,
            "parcel_id": self.parcel_id,
            "tracking_id": self.tracking_id,
            "time": self.time,
            "status": self.status,
            "location": self.location,
            "note": self.note,
        })
        return document

    def __repr__(self):
        return f"<TrackingEvent(parcel_id={self.parcel_id}, time={self.time}, status='{self.status}')>"
