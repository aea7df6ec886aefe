"""
Append-only public submissions: feedback and business queries.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from trek_backend.app.core.sanitize import escaped_length
from trek_backend.app.db.session import Base


class Feedback(Base):
    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    feedback = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class BusinessQuery(Base):
    """Contact-form submission from corporate or group clients."""
    __tablename__ = "business_queries"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(escaped_length(100)), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
