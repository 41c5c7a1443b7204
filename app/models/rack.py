"""Rack model - one inventory record for one part at one rack."""
import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Float, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class RackLocation(str, enum.Enum):
    ACCESSORIES = "ACCESSORIES"
    SPARES = "SPARES"


class Rack(Base):
    """Rack model - belongs to a team, scanned by a user.

    (part_no, rack_no) uniqueness is checked before insert, not by an index.
    mrp, ndp and master_description hold whatever was known at creation;
    reads overlay the current master description values.
    """
    __tablename__ = "racks"

    id = Column(Integer, primary_key=True, index=True)
    rack_no = Column(String(100), nullable=False)
    part_no = Column(String(100), nullable=False, index=True)
    next_qty = Column(Integer, nullable=False)
    location = Column(Enum(RackLocation), nullable=False)
    site_name = Column(String(255), nullable=False, index=True)
    team_id = Column(Integer, ForeignKey("teams.id"), nullable=False, index=True)
    scanned_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    # Last-known cache
    mrp = Column(Float, nullable=True)
    ndp = Column(Float, nullable=True)
    master_description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    team = relationship("Team", back_populates="racks")
    scanned_by = relationship("User")
