"""Exported rack snapshot schemas."""
from datetime import datetime
from typing import Optional, List
from pydantic import Field

from app.schemas.common import CamelModel


class SnapshotItem(CamelModel):
    """One line of an exported rack listing."""
    s_no: int
    location: str
    rack_no: str
    part_no: str
    next_qty: int = Field(ge=0)
    mrp: Optional[float] = Field(default=None, ge=0)
    ndp: Optional[float] = Field(default=None, ge=0)
    material_description: Optional[str] = ""


class SnapshotCreate(CamelModel):
    snapshots: List[SnapshotItem] = []
    team_id: Optional[int] = None
    site_name: Optional[str] = None


class SnapshotCreateResult(CamelModel):
    success: bool = True
    message: str
    count: int


class SnapshotResponse(SnapshotItem):
    id: int
    team_id: Optional[int] = None
    site_name: str
    exported_by_id: int
    exported_at: Optional[datetime] = None


class SnapshotListEnvelope(CamelModel):
    success: bool = True
    count: int
    data: List[SnapshotResponse]
