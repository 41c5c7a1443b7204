"""Team schemas for request/response validation."""
from datetime import datetime
from typing import Optional, List

from app.models.team import TeamStatus
from app.schemas.common import CamelModel
from app.schemas.user import UserSummary


class TeamCreate(CamelModel):
    """Schema for creating a team.

    site_name and location are checked by the route so that an empty
    string is rejected the same way as a missing field.
    """
    site_name: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    is_new_site: bool = False
    members: List[int] = []
    leader: Optional[int] = None


class TeamUpdate(CamelModel):
    """Schema for updating a team; unset fields keep their value."""
    site_name: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    is_new_site: Optional[bool] = None
    members: Optional[List[int]] = None
    status: Optional[TeamStatus] = None


class MemberChange(CamelModel):
    """Schema for adding or removing one member."""
    member_id: int


class TeamResponse(CamelModel):
    """Schema for team response."""
    id: int
    site_name: str
    location: str
    description: Optional[str] = None
    is_new_site: bool
    team_leader_id: Optional[int] = None
    team_leader: Optional[UserSummary] = None
    members: List[UserSummary] = []
    status: TeamStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TeamEnvelope(CamelModel):
    success: bool = True
    message: Optional[str] = None
    team: TeamResponse


class TeamListEnvelope(CamelModel):
    success: bool = True
    count: int
    teams: List[TeamResponse]


class TeamCompletedEnvelope(CamelModel):
    success: bool = True
    message: str
    data: TeamResponse
