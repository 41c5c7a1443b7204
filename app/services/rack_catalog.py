"""Rack read path.

Racks are read through one query that joins the current master description
for each part number plus the owning team and the scanning user. The values
stored on the rack itself (mrp, ndp, master_description) are only a cache
from creation time; the joined master description always wins.

Master descriptions are not unique by part number. When several rows share a
part number the most recently inserted one (highest id) is used.
"""
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from app.models.master_description import MasterDescription
from app.models.rack import Rack
from app.models.team import Team
from app.schemas.rack import RackDetail


def latest_master_ids(db: Session):
    """Subquery: part_no -> id of the newest master description row."""
    return (
        db.query(
            MasterDescription.part_no.label("part_no"),
            func.max(MasterDescription.id).label("master_id"),
        )
        .group_by(MasterDescription.part_no)
        .subquery()
    )


def joined_rack_query(db: Session) -> Query:
    """Rows of (Rack, MasterDescription or None) with team and scanner eager-loaded."""
    latest = latest_master_ids(db)
    return (
        db.query(Rack, MasterDescription)
        .outerjoin(latest, latest.c.part_no == Rack.part_no)
        .outerjoin(MasterDescription, MasterDescription.id == latest.c.master_id)
        .options(
            joinedload(Rack.team).joinedload(Team.team_leader),
            joinedload(Rack.team).selectinload(Team.members),
            joinedload(Rack.scanned_by),
        )
    )


def to_detail(rack: Rack, master: Optional[MasterDescription]) -> RackDetail:
    """Overlay the master description values onto the rack."""
    detail = RackDetail.model_validate(rack)
    detail.material_description = master.description if master else None
    detail.ndp = master.ndp if master else None
    detail.mrp = master.mrp if master else None
    return detail


def list_rack_details(
    db: Session,
    team_ids: Optional[List[int]] = None,
    team_id: Optional[int] = None,
    site_name: Optional[str] = None,
) -> List[RackDetail]:
    """List racks newest first.

    team_ids restricts to a principal's scope (None means unrestricted);
    team_id and site_name are caller refinements.
    """
    query = joined_rack_query(db)
    if team_ids is not None:
        query = query.filter(Rack.team_id.in_(team_ids))
    if team_id is not None:
        query = query.filter(Rack.team_id == team_id)
    if site_name:
        query = query.filter(Rack.site_name == site_name)

    rows = query.order_by(Rack.created_at.desc(), Rack.id.desc()).all()
    return [to_detail(rack, master) for rack, master in rows]


def find_rack_row(db: Session, rack_id: int) -> Optional[Tuple[Rack, Optional[MasterDescription]]]:
    return joined_rack_query(db).filter(Rack.id == rack_id).first()
