"""Exported rack snapshot model."""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Float, Index
from sqlalchemy.sql import func

from app.database import Base


class ExportedRackSnapshot(Base):
    """Immutable copy of one rack row taken at export time.

    Rows are only ever inserted in bulk and never updated.
    """
    __tablename__ = "exported_rack_snapshots"

    id = Column(Integer, primary_key=True, index=True)

    # Snapshot of the exported listing
    s_no = Column(Integer, nullable=False)  # Serial number in the export list
    location = Column(String(50), nullable=False)
    rack_no = Column(String(100), nullable=False)
    part_no = Column(String(100), nullable=False)
    next_qty = Column(Integer, nullable=False)
    mrp = Column(Float, nullable=True)
    ndp = Column(Float, nullable=True)
    material_description = Column(Text, default="")

    exported_at = Column(DateTime(timezone=True), server_default=func.now())
    team_id = Column(Integer, ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)
    site_name = Column(String(255), nullable=False)
    exported_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    __table_args__ = (
        Index("ix_exported_team_exported_at", "team_id", "exported_at"),
        Index("ix_exported_site_exported_at", "site_name", "exported_at"),
    )
