"""
Trek database model.

A trek is the sellable guided hiking tour. Bookings and GPS tracking rows
reference it and are removed together with it.
"""

from sqlalchemy import Column, Integer, String, Text, Float, DateTime, Enum
from sqlalchemy.sql import func
from trek_backend.app.core.sanitize import escaped_length
from trek_backend.app.db.session import Base
from trek_backend.app.models.trek_enums import TrekDifficulty

DEFAULT_TREK_PRICE = 1999


class Trek(Base):
    """Trek catalogue entry."""
    __tablename__ = "treks"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(escaped_length(100)), unique=True, nullable=False)
    description = Column(Text, nullable=False)
    duration = Column(String(escaped_length(50)), nullable=False)
    trek_length = Column(Float, nullable=False)  # km
    difficulty = Column(
        Enum(TrekDifficulty, values_callable=lambda e: [m.value for m in e]),
        nullable=False
    )
    max_altitude = Column(Float, nullable=False)  # ft
    base_village = Column(String(escaped_length(100)), nullable=False)
    transport = Column(String(escaped_length(200)), nullable=False)
    meals = Column(String(escaped_length(200)), nullable=False)
    sightseeing = Column(String(escaped_length(200)), nullable=False)
    image = Column(Text, nullable=False)
    price = Column(Float, nullable=False, default=DEFAULT_TREK_PRICE)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Trek(id={self.id}, name='{self.name}')>"
