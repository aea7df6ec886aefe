"""
Booking database model.

Bookings are created by the public booking form, never edited, and only
deleted by an admin (or together with their trek).
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from trek_backend.app.core.sanitize import escaped_length
from trek_backend.app.db.session import Base


class Booking(Base):
    """Trek booking request."""
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    trek_id = Column(Integer, ForeignKey("treks.id"), nullable=False, index=True)

    # Snapshot of the trek name at booking time
    trek_name = Column(String(escaped_length(100)), nullable=False)

    full_name = Column(String(escaped_length(100)), nullable=False)
    contact = Column(String(20), nullable=False)
    email = Column(String(255), nullable=False)
    group_size = Column(Integer, nullable=False, default=1)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Booking(id={self.id}, trek_id={self.trek_id})>"
