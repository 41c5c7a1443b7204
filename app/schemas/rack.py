"""Rack schemas for request/response validation."""
from datetime import datetime
from typing import Optional, List
from pydantic import Field

from app.models.rack import RackLocation
from app.schemas.common import CamelModel
from app.schemas.team import TeamResponse
from app.schemas.user import UserSummary


class RackCreate(CamelModel):
    """Schema for creating a rack."""
    rack_no: str = Field(min_length=1)
    part_no: str = Field(min_length=1)
    next_qty: int = Field(ge=0)
    site_name: str = Field(min_length=1)
    location: RackLocation


class RackUpdate(CamelModel):
    """Schema for updating a rack.

    team, site_name and scanned_by are fixed at creation and not accepted here.
    """
    rack_no: Optional[str] = Field(default=None, min_length=1)
    part_no: Optional[str] = Field(default=None, min_length=1)
    next_qty: Optional[int] = Field(default=None, ge=0)
    location: Optional[RackLocation] = None
    mrp: Optional[float] = Field(default=None, ge=0)
    ndp: Optional[float] = Field(default=None, ge=0)
    master_description: Optional[str] = None


class RackResponse(CamelModel):
    """Rack as stored."""
    id: int
    rack_no: str
    part_no: str
    next_qty: int
    location: RackLocation
    site_name: str
    team_id: int
    scanned_by_id: int
    mrp: Optional[float] = None
    ndp: Optional[float] = None
    master_description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RackDetail(CamelModel):
    """Rack joined with its team, scanner and current master description."""
    id: int
    rack_no: str
    part_no: str
    next_qty: int
    location: RackLocation
    site_name: str
    team_id: int
    team: Optional[TeamResponse] = None
    scanned_by_id: int
    scanned_by: Optional[UserSummary] = None
    material_description: Optional[str] = None
    ndp: Optional[float] = None
    mrp: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RackEnvelope(CamelModel):
    success: bool = True
    message: Optional[str] = None
    rack: RackResponse


class RackDetailEnvelope(CamelModel):
    success: bool = True
    message: Optional[str] = None
    data: RackDetail


class RackListEnvelope(CamelModel):
    success: bool = True
    count: int
    data: List[RackDetail]
