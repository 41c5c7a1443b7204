"""Team routes."""
from typing import List, Optional

import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth import get_current_user
from app.database import get_db, commit_or_fail
from app.errors import MAX_ID, Conflict, Forbidden, NotFound, ValidationError
from app.models.team import Team, TeamStatus
from app.models.user import User, UserRole
from app.permissions import TeamAction, authorize
from app.schemas.team import (
    MemberChange,
    TeamCompletedEnvelope,
    TeamCreate,
    TeamEnvelope,
    TeamListEnvelope,
    TeamUpdate,
)

router = APIRouter(prefix="/teams", tags=["Teams"])
logger = structlog.get_logger(__name__)


def get_team_or_404(db: Session, team_id: int) -> Team:
    if not 1 <= team_id <= MAX_ID:
        raise NotFound("Team not found")
    team = db.query(Team).filter(Team.id == team_id).first()
    if not team:
        raise NotFound("Team not found")
    return team


def validate_members(db: Session, member_ids: List[int]) -> List[User]:
    """Resolve member ids; one unknown id or non-member role fails them all."""
    unique_ids = list(dict.fromkeys(member_ids))
    if not unique_ids:
        return []
    users = db.query(User).filter(User.id.in_(unique_ids)).order_by(User.id).all()
    if len(users) != len(unique_ids):
        raise ValidationError("One or more provided member IDs are invalid.")
    if any(user.role != UserRole.TEAM_MEMBER for user in users):
        raise ValidationError("Only users with the 'team_member' role can be added to a team.")
    return users


def ensure_site_available(db: Session, site_name: str, exclude_team_id: Optional[int] = None) -> None:
    """Site names are unique among active teams."""
    query = db.query(Team).filter(Team.site_name == site_name, Team.status == TeamStatus.ACTIVE)
    if exclude_team_id is not None:
        query = query.filter(Team.id != exclude_team_id)
    if query.first():
        raise Conflict(f"An active team for site '{site_name}' already exists.")


def complete_team(team: Team) -> None:
    """Archive a team: no members, no leader, status Completed."""
    team.members = []
    team.team_leader_id = None
    team.status = TeamStatus.COMPLETED


@router.post("/", response_model=TeamEnvelope, status_code=status.HTTP_201_CREATED)
async def create_team(
    team_data: TeamCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Create a team (admin picks the leader, team leaders lead their own)."""
    if not team_data.site_name or not team_data.location:
        raise ValidationError("Site Name and Location are required")

    if current_user.role == UserRole.ADMIN:
        if not team_data.leader:
            raise ValidationError("Admin must explicitly select a team leader.")
        leader = db.query(User).filter(User.id == team_data.leader).first()
        if not leader or leader.role not in (UserRole.TEAM_LEADER, UserRole.ADMIN):
            raise ValidationError("Provided leader ID is invalid or not a team leader/admin.")
    elif current_user.role == UserRole.TEAM_LEADER:
        if team_data.leader and team_data.leader != current_user.id:
            raise Forbidden("Team leaders can only create teams with themselves as the leader.")
        leader = current_user
    else:
        raise Forbidden("Not authorized to create teams.")

    members = validate_members(db, team_data.members)
    ensure_site_available(db, team_data.site_name)

    team = Team(
        site_name=team_data.site_name,
        location=team_data.location,
        description=team_data.description,
        is_new_site=bool(team_data.is_new_site),
        team_leader_id=leader.id,
        members=members,
        status=TeamStatus.ACTIVE,
    )
    db.add(team)
    commit_or_fail(db, "creating team")
    db.refresh(team)

    logger.info("team_created", team_id=team.id, site_name=team.site_name, leader_id=leader.id)
    return {"success": True, "message": "Team created successfully", "team": team}


@router.get("/", response_model=TeamListEnvelope)
async def list_teams(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List teams: admins see all, everyone else the active teams they lead."""
    query = db.query(Team)
    if current_user.role != UserRole.ADMIN:
        query = query.filter(Team.team_leader_id == current_user.id, Team.status == TeamStatus.ACTIVE)
    teams = query.order_by(Team.created_at.desc(), Team.id.desc()).all()
    return {"success": True, "count": len(teams), "teams": teams}


@router.get("/member/{member_id}", response_model=TeamListEnvelope)
async def list_teams_for_member(
    member_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Active teams a user belongs to (self, or any user for admins and leaders)."""
    if current_user.id != member_id and current_user.role not in (UserRole.ADMIN, UserRole.TEAM_LEADER):
        raise Forbidden("Not authorized to view these teams for another user.")

    teams = (
        db.query(Team)
        .filter(Team.members.any(User.id == member_id), Team.status == TeamStatus.ACTIVE)
        .order_by(Team.created_at.desc(), Team.id.desc())
        .all()
    )
    return {"success": True, "count": len(teams), "teams": teams}


@router.get("/leader/{leader_id}", response_model=TeamListEnvelope)
async def list_teams_for_leader(
    leader_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Teams led by a user, any status (self, or any user for admins)."""
    if current_user.role != UserRole.ADMIN and current_user.id != leader_id:
        raise Forbidden("Not authorized to view teams for this leader ID.")

    teams = (
        db.query(Team)
        .filter(Team.team_leader_id == leader_id)
        .order_by(Team.created_at.desc(), Team.id.desc())
        .all()
    )
    return {"success": True, "count": len(teams), "teams": teams}


@router.get("/{team_id}", response_model=TeamEnvelope)
async def get_team(
    team_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a specific team."""
    team = get_team_or_404(db, team_id)
    authorize(current_user, team, TeamAction.VIEW_TEAM)
    return {"success": True, "team": team}


@router.put("/{team_id}", response_model=TeamEnvelope)
async def update_team(
    team_id: int,
    team_update: TeamUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update a team; only the supplied fields change."""
    team = get_team_or_404(db, team_id)
    authorize(current_user, team, TeamAction.UPDATE_TEAM)

    update_data = team_update.model_dump(exclude_unset=True)

    # Empty strings and nulls keep the previous value
    for field in ("site_name", "location", "is_new_site"):
        if update_data.get(field) in (None, ""):
            update_data.pop(field, None)

    members = None
    if update_data.get("members") is not None:
        members = validate_members(db, update_data.pop("members"))
    else:
        update_data.pop("members", None)

    new_status = update_data.pop("status", None)
    if new_status == TeamStatus.ACTIVE and team.status == TeamStatus.COMPLETED:
        raise ValidationError("Completed teams cannot be reactivated.")
    if members and team.status == TeamStatus.COMPLETED:
        raise ValidationError("Cannot add members to a completed team.")

    site_name = update_data.get("site_name", team.site_name)
    if site_name != team.site_name and team.status == TeamStatus.ACTIVE:
        ensure_site_available(db, site_name, exclude_team_id=team.id)

    for field, value in update_data.items():
        setattr(team, field, value)
    if members is not None:
        team.members = members
    if new_status == TeamStatus.COMPLETED:
        complete_team(team)

    commit_or_fail(db, "updating team")
    db.refresh(team)

    logger.info("team_updated", team_id=team.id, fields=sorted(team_update.model_fields_set))
    return {"success": True, "message": "Team updated successfully", "team": team}


@router.delete("/{team_id}")
async def delete_team(
    team_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a team (admin or its leader).

    Racks keep a non-null reference to their team, so a team that still
    owns racks is refused with 400 until they are removed.
    """
    team = get_team_or_404(db, team_id)
    authorize(current_user, team, TeamAction.DELETE_TEAM)

    if team.racks:
        raise ValidationError("Cannot delete team with racks. Remove all racks first.")

    db.delete(team)
    commit_or_fail(db, "deleting team")

    logger.info("team_deleted", team_id=team_id)
    return {"success": True, "message": "Team deleted successfully"}


@router.put("/{team_id}/add-member", response_model=TeamEnvelope)
async def add_team_member(
    team_id: int,
    change: MemberChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Add one team_member user to a team."""
    team = get_team_or_404(db, team_id)
    authorize(current_user, team, TeamAction.MANAGE_MEMBERS)

    if team.status == TeamStatus.COMPLETED:
        raise ValidationError("Cannot add members to a completed team.")

    member = db.query(User).filter(User.id == change.member_id).first()
    if not member:
        raise NotFound("Member user not found")
    if member.role != UserRole.TEAM_MEMBER:
        raise ValidationError("Only Team Members can be added to a team.")
    if member.id in team.member_ids:
        raise Conflict("User is already a member of this team.")

    team.members.append(member)
    commit_or_fail(db, "adding member")
    db.refresh(team)

    logger.info("team_member_added", team_id=team.id, member_id=member.id)
    return {"success": True, "message": "Member added successfully", "team": team}


@router.put("/{team_id}/remove-member", response_model=TeamEnvelope)
async def remove_team_member(
    team_id: int,
    change: MemberChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Remove one member from a team."""
    team = get_team_or_404(db, team_id)
    authorize(current_user, team, TeamAction.MANAGE_MEMBERS)

    member = next((m for m in team.members if m.id == change.member_id), None)
    if member is None:
        raise NotFound("User is not a member of this team.")

    team.members.remove(member)
    commit_or_fail(db, "removing member")
    db.refresh(team)

    logger.info("team_member_removed", team_id=team.id, member_id=change.member_id)
    return {"success": True, "message": "Member removed successfully", "team": team}


@router.put("/{team_id}/complete", response_model=TeamCompletedEnvelope)
async def complete_team_work(
    team_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Finish a team's work: clear members and leader, mark Completed."""
    team = get_team_or_404(db, team_id)
    authorize(current_user, team, TeamAction.COMPLETE_TEAM)

    complete_team(team)
    commit_or_fail(db, "completing team work")
    db.refresh(team)

    logger.info("team_completed", team_id=team.id, site_name=team.site_name)
    return {
        "success": True,
        "message": f"Team '{team.site_name}' work completed. Members and leader cleared, status set to 'Completed'.",
        "data": team,
    }
