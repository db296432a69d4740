"""
Payment database model.

One record per settled payment intent.
"""

from sqlalchemy import Column, Integer, String, DateTime, Index
from parcelx_backend.app.db.session import Base, new_id, utcnow


class Payment(Base):
    """Payment history record, keyed by the processor's intent id."""
    __tablename__ = "payments"

    id = Column(String(32), primary_key=True, default=new_id)
    payer_email = Column(String(255), nullable=True)
    payment_intent_id = Column(String(255), unique=True, nullable=False)
    parcel_id = Column(String(64), nullable=True, index=True)
    amount = Column(Integer, nullable=True)  # minor units
    currency = Column(String(10), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    __table_args__ = (
        Index("ix_payments_payer_email_created_at", "payer_email", "created_at"),
    )

    def to_document(self) -> dict:
        return {
            "_id": self.id,
            "payerEmail": self.payer_email,
            "paymentIntentId": self.payment_intent_id,
            "parcelId": self.parcel_id,
            "amount": self.amount,
            "currency": self.currency,
            "createdAt": self.created_at,
        }

    def __repr__(self):
        return f"<Payment(intent='{self.payment_intent_id}', payer='{self.payer_email}')>"
