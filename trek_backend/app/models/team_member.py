"""
Team member database model.

Rows back the "Week Heroes" section of the home page. The set of members is
seeded once; admins edit them in place and never add or remove rows.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from trek_backend.app.core.sanitize import escaped_length
from trek_backend.app.db.session import Base


class TeamMember(Base):
    __tablename__ = "team_members"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(escaped_length(100)), nullable=False)
    role = Column(String(escaped_length(100)), nullable=False)
    image_url = Column(Text, nullable=False)
    instagram_url = Column(Text, nullable=False)
    display_order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<TeamMember(id={self.id}, name='{self.name}')>"
