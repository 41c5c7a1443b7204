"""Team-scoped authorization matrix.

Every team-scoped check in the API goes through ``authorize``. The caller's
relation to a team is computed once (admin, leader, member) and compared
against the row for the requested action. Admins are always allowed.
"""
import enum
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.orm import Session

from app.errors import Forbidden
from app.models.team import Team, team_members
from app.models.user import User, UserRole


class TeamAction(str, enum.Enum):
    VIEW_TEAM = "view_team"
    UPDATE_TEAM = "update_team"
    DELETE_TEAM = "delete_team"
    MANAGE_MEMBERS = "manage_members"
    COMPLETE_TEAM = "complete_team"
    CREATE_RACK = "create_rack"
    READ_RACK = "read_rack"
    UPDATE_RACK = "update_rack"
    DELETE_RACK = "delete_rack"
    CREATE_EXPORT = "create_export"
    READ_EXPORT = "read_export"


# action -> (leader allowed, member allowed)
MATRIX = {
    TeamAction.VIEW_TEAM: (True, False),
    TeamAction.UPDATE_TEAM: (True, False),
    TeamAction.DELETE_TEAM: (True, False),
    TeamAction.MANAGE_MEMBERS: (True, False),
    TeamAction.COMPLETE_TEAM: (True, False),
    TeamAction.CREATE_RACK: (True, True),
    TeamAction.READ_RACK: (True, True),
    TeamAction.UPDATE_RACK: (True, False),
    TeamAction.DELETE_RACK: (True, False),
    TeamAction.CREATE_EXPORT: (True, False),
    TeamAction.READ_EXPORT: (True, False),
}

DENY_MESSAGES = {
    TeamAction.VIEW_TEAM: "Not authorized to view this team",
    TeamAction.UPDATE_TEAM: "Not authorized to update this team.",
    TeamAction.DELETE_TEAM: "Not authorized to delete this team",
    TeamAction.MANAGE_MEMBERS: "Not authorized to modify this team",
    TeamAction.COMPLETE_TEAM: "Not authorized to complete work for this team.",
    TeamAction.CREATE_RACK: "Not authorized to create rack for this team.",
    TeamAction.READ_RACK: "Not authorized to view this rack.",
    TeamAction.UPDATE_RACK: "Not authorized to update this rack.",
    TeamAction.DELETE_RACK: "Not authorized to delete this rack.",
    TeamAction.CREATE_EXPORT: "Not authorized to create snapshots for this team.",
    TeamAction.READ_EXPORT: "Not authorized to view snapshots for this team.",
}


@dataclass(frozen=True)
class TeamRelation:
    """How a user stands with respect to one team."""
    is_admin: bool
    is_leader: bool
    is_member: bool


def team_relation(user: User, team: Optional[Team]) -> TeamRelation:
    is_admin = user.role == UserRole.ADMIN
    if team is None:
        return TeamRelation(is_admin, False, False)
    is_leader = (
        user.role == UserRole.TEAM_LEADER
        and team.team_leader_id is not None
        and team.team_leader_id == user.id
    )
    is_member = user.role == UserRole.TEAM_MEMBER and user.id in team.member_ids
    return TeamRelation(is_admin, is_leader, is_member)


def is_allowed(user: User, team: Optional[Team], action: TeamAction) -> bool:
    relation = team_relation(user, team)
    leader_ok, member_ok = MATRIX[action]
    return relation.is_admin or (leader_ok and relation.is_leader) or (member_ok and relation.is_member)


def authorize(user: User, team: Optional[Team], action: TeamAction) -> None:
    """Raise Forbidden unless the matrix grants ``action`` on ``team``."""
    if not is_allowed(user, team, action):
        raise Forbidden(DENY_MESSAGES[action])


def scoped_team_ids(db: Session, user: User) -> Optional[List[int]]:
    """Team ids a non-admin may read racks from.

    Returns None for admins (no restriction). Leaders get every team they
    lead, members every team they belong to, regardless of team status.
    """
    if user.role == UserRole.ADMIN:
        return None
    if user.role == UserRole.TEAM_LEADER:
        rows = db.query(Team.id).filter(Team.team_leader_id == user.id).all()
    elif user.role == UserRole.TEAM_MEMBER:
        rows = (
            db.query(team_members.c.team_id)
            .filter(team_members.c.user_id == user.id)
            .all()
        )
    else:
        return []
    return [row[0] for row in rows]
