"""Rack routes."""
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.auth import require_any_role
from app.database import get_db, commit_or_fail
from app.errors import Conflict, NotFound, ValidationError, parse_id
from app.models.rack import Rack
from app.models.team import Team, TeamStatus
from app.models.user import User, UserRole
from app.permissions import TeamAction, authorize, scoped_team_ids
from app.schemas.common import DeleteResponse
from app.schemas.rack import (
    RackCreate,
    RackDetailEnvelope,
    RackEnvelope,
    RackListEnvelope,
    RackUpdate,
)
from app.services.rack_catalog import find_rack_row, list_rack_details, to_detail

router = APIRouter(prefix="/racks", tags=["Racks"])
logger = structlog.get_logger(__name__)


def resolve_site_team(db: Session, site_name: str) -> Team:
    """Team for a site name, preferring the active one."""
    team = (
        db.query(Team)
        .filter(Team.site_name == site_name)
        .order_by((Team.status == TeamStatus.ACTIVE).desc(), Team.created_at.desc(), Team.id.desc())
        .first()
    )
    if not team:
        raise NotFound(f"Team with siteName '{site_name}' not found.")
    return team


def get_rack_or_404(db: Session, rack_id: str) -> Rack:
    rack = db.query(Rack).filter(Rack.id == parse_id(rack_id, "Rack")).first()
    if not rack:
        raise NotFound("Rack not found.")
    return rack


@router.post("/", response_model=RackEnvelope, status_code=status.HTTP_201_CREATED)
async def create_rack(
    rack_data: RackCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_any_role)
):
    """Create a rack for a site the caller works on.

    Only an active team takes new racks; a site whose teams are all
    completed is refused with 400.
    """
    team = resolve_site_team(db, rack_data.site_name)
    authorize(current_user, team, TeamAction.CREATE_RACK)
    if team.status != TeamStatus.ACTIVE:
        raise ValidationError("Cannot add racks to a completed team.")

    # Check-then-insert: two concurrent creates can both pass this
    existing = (
        db.query(Rack)
        .filter(Rack.part_no == rack_data.part_no, Rack.rack_no == rack_data.rack_no)
        .first()
    )
    if existing:
        raise Conflict("PartNumber already exists for this Rack.")

    rack = Rack(
        **rack_data.model_dump(),
        team_id=team.id,
        scanned_by_id=current_user.id,
    )
    db.add(rack)
    commit_or_fail(db, "creating rack")
    db.refresh(rack)

    logger.info("rack_created", rack_id=rack.id, team_id=team.id, part_no=rack.part_no)
    return {"success": True, "message": "Rack created successfully", "rack": rack}


@router.get("/", response_model=RackListEnvelope)
async def list_racks(
    site_name: Optional[str] = Query(None, alias="siteName", description="Filter by site"),
    team_id: Optional[int] = Query(None, alias="teamId", description="Filter by team (admin only)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_any_role)
):
    """List racks visible to the caller, newest first."""
    team_ids = scoped_team_ids(db, current_user)
    if team_ids is not None and not team_ids:
        return {"success": True, "count": 0, "data": []}

    racks = list_rack_details(
        db,
        team_ids=team_ids,
        team_id=team_id if current_user.role == UserRole.ADMIN else None,
        site_name=site_name,
    )
    logger.debug("racks_listed", user_id=current_user.id, count=len(racks))
    return {"success": True, "count": len(racks), "data": racks}


@router.get("/{rack_id}", response_model=RackDetailEnvelope)
async def get_rack(
    rack_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_any_role)
):
    """Get a single rack with its joined details."""
    row = find_rack_row(db, parse_id(rack_id, "Rack"))
    if row is None:
        raise NotFound("Rack not found.")
    rack, master = row

    # The rack has to exist before team membership can be checked
    authorize(current_user, rack.team, TeamAction.READ_RACK)
    return {"success": True, "data": to_detail(rack, master)}


@router.put("/{rack_id}", response_model=RackDetailEnvelope)
async def update_rack(
    rack_id: str,
    rack_update: RackUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_any_role)
):
    """Update a rack (admin or the team's leader)."""
    rack = get_rack_or_404(db, rack_id)
    authorize(current_user, rack.team, TeamAction.UPDATE_RACK)

    update_data = rack_update.model_dump(exclude_unset=True)
    for field in ("rack_no", "part_no", "next_qty", "location"):
        if field in update_data and update_data[field] is None:
            update_data.pop(field)

    # Check if the new part/rack pair is still unique
    part_no = update_data.get("part_no", rack.part_no)
    rack_no = update_data.get("rack_no", rack.rack_no)
    if (part_no, rack_no) != (rack.part_no, rack.rack_no):
        existing = (
            db.query(Rack)
            .filter(Rack.part_no == part_no, Rack.rack_no == rack_no, Rack.id != rack.id)
            .first()
        )
        if existing:
            raise Conflict("PartNumber already exists for this Rack.")

    for field, value in update_data.items():
        setattr(rack, field, value)

    commit_or_fail(db, "updating rack")

    rack, master = find_rack_row(db, rack.id)
    logger.info("rack_updated", rack_id=rack.id, fields=sorted(update_data))
    return {"success": True, "message": "Rack updated successfully", "data": to_detail(rack, master)}


@router.delete("/{rack_id}", response_model=DeleteResponse)
async def delete_rack(
    rack_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_any_role)
):
    """Delete a rack (admin or the team's leader)."""
    rack = get_rack_or_404(db, rack_id)
    authorize(current_user, rack.team, TeamAction.DELETE_RACK)

    deleted_id = rack.id
    db.delete(rack)
    commit_or_fail(db, "deleting rack")

    logger.info("rack_deleted", rack_id=deleted_id)
    return {"success": True, "message": "Rack deleted successfully", "data": {}}
