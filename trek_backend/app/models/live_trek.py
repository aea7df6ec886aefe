"""
GPS live-tracking database models.

A trek broadcasts its position through tracking sessions (``live_treks``).
Sessions are never deleted, so a trek accumulates a history of them;
``trek_tracking_state`` points at the one that is current and at the latest
location ping, which is what every "latest value" read goes through.
"""

from sqlalchemy import Column, Integer, String, Text, Float, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from trek_backend.app.core.sanitize import escaped_length
from trek_backend.app.db.session import Base


class LiveTrek(Base):
    """One tracking session of a trek."""
    __tablename__ = "live_treks"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    trek_id = Column(Integer, ForeignKey("treks.id", ondelete="CASCADE"), nullable=False, index=True)

    is_active = Column(Boolean, default=False, nullable=False)
    google_maps_link = Column(Text, nullable=True)
    driver_id = Column(String(escaped_length(100)), nullable=True)  # driver display name
    status_message = Column(Text, nullable=True)

    active_since = Column(DateTime(timezone=True), nullable=True)
    last_location_update = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<LiveTrek(id={self.id}, trek_id={self.trek_id}, is_active={self.is_active})>"


class TrekLocation(Base):
    """
    GPS ping for a trek.

    Append-only breadcrumb trail, kept after tracking stops.
    """
    __tablename__ = "trek_locations"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    trek_id = Column(Integer, ForeignKey("treks.id", ondelete="CASCADE"), nullable=False, index=True)

    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    accuracy = Column(Float, nullable=True)  # meters
    altitude = Column(Float, nullable=True)
    speed = Column(Float, nullable=True)
    heading = Column(Float, nullable=True)

    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<TrekLocation(trek_id={self.trek_id}, lat={self.latitude}, lng={self.longitude})>"


class TrekTrackingState(Base):
    """
    Current-state projection, one row per tracked trek.

    The primary key on ``trek_id`` allows a single current session per trek.
    """
    __tablename__ = "trek_tracking_state"

    trek_id = Column(Integer, ForeignKey("treks.id", ondelete="CASCADE"), primary_key=True)
    current_live_trek_id = Column(
        Integer, ForeignKey("live_treks.id", ondelete="SET NULL"), nullable=True
    )
    last_location_id = Column(
        Integer, ForeignKey("trek_locations.id", ondelete="SET NULL"), nullable=True
    )
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<TrekTrackingState(trek_id={self.trek_id}, current_live_trek_id={self.current_live_trek_id})>"


class LiveTrekSettings(Base):
    """Per-trek viewer settings, upserted on activation."""
    __tablename__ = "live_trek_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    trek_id = Column(Integer, ForeignKey("treks.id", ondelete="CASCADE"), unique=True, nullable=False)
    tracking_password = Column(String(255), nullable=False)
    chat_enabled = Column(Boolean, default=True, nullable=False)
    chat_locked = Column(Boolean, default=False, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class GpsConfig(Base):
    """Process-wide key/value configuration for GPS tracking (e.g. driver_password)."""
    __tablename__ = "gps_config"

    id = Column(Integer, primary_key=True, autoincrement=True)
    config_key = Column(String(100), unique=True, nullable=False)
    config_value = Column(Text, nullable=False)
    description = Column(String(255), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
