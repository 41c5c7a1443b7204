"""Exported rack snapshot routes."""
import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.auth import require_leader
from app.database import get_db, commit_or_fail
from app.errors import MAX_ID, NotFound, ValidationError
from app.models.exported_rack import ExportedRackSnapshot
from app.models.team import Team
from app.models.user import User
from app.permissions import TeamAction, authorize
from app.schemas.exported_rack import SnapshotCreate, SnapshotCreateResult, SnapshotListEnvelope

router = APIRouter(prefix="/exported-racks-snapshot", tags=["Exported Racks"])
logger = structlog.get_logger(__name__)


def get_snapshot_team(db: Session, team_id: int) -> Team:
    if not 1 <= team_id <= MAX_ID:
        raise NotFound(f"Team with ID {team_id} not found.")
    team = db.query(Team).filter(Team.id == team_id).first()
    if not team:
        raise NotFound(f"Team with ID {team_id} not found.")
    return team


@router.post("/", response_model=SnapshotCreateResult, status_code=status.HTTP_201_CREATED)
async def create_exported_snapshots(
    export: SnapshotCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_leader)
):
    """Save an exported rack listing for a team (admin or the team's leader).

    Rows are added and committed together, but no all-or-nothing guarantee
    is promised to callers.
    """
    if not export.snapshots:
        raise ValidationError("No snapshot data provided.")
    if not export.team_id or not export.site_name:
        raise ValidationError("Team ID and Site Name are required for the snapshot.")

    team = get_snapshot_team(db, export.team_id)
    authorize(current_user, team, TeamAction.CREATE_EXPORT)

    rows = [
        ExportedRackSnapshot(
            **item.model_dump(),
            team_id=team.id,
            site_name=export.site_name,
            exported_by_id=current_user.id,
        )
        for item in export.snapshots
    ]
    db.add_all(rows)
    commit_or_fail(db, "saving snapshots")

    logger.info("rack_snapshots_exported", team_id=team.id, count=len(rows), exported_by=current_user.id)
    return {
        "success": True,
        "message": f"{len(rows)} rack snapshots saved successfully.",
        "count": len(rows),
    }


@router.get("/", response_model=SnapshotListEnvelope)
async def list_exported_snapshots(
    team_id: int = Query(..., alias="teamId", description="Team whose exports to list"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_leader)
):
    """List a team's exported snapshots, newest export first."""
    team = get_snapshot_team(db, team_id)
    authorize(current_user, team, TeamAction.READ_EXPORT)

    snapshots = (
        db.query(ExportedRackSnapshot)
        .filter(ExportedRackSnapshot.team_id == team.id)
        .order_by(ExportedRackSnapshot.exported_at.desc(), ExportedRackSnapshot.s_no, ExportedRackSnapshot.id)
        .all()
    )
    return {"success": True, "count": len(snapshots), "data": snapshots}
