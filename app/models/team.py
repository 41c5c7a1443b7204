"""Team model - one site's working group."""
import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Enum, Table
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class TeamStatus(str, enum.Enum):
    ACTIVE = "Active"
    COMPLETED = "Completed"


# Composite primary key keeps membership a set
team_members = Table(
    "team_members",
    Base.metadata,
    Column("team_id", Integer, ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Team(Base):
    """Team model - a leader and a set of members working one site.

    A completed team has no members and no leader. The complete operation
    enforces this; the schema does not.
    """
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, index=True)
    site_name = Column(String(255), nullable=False, index=True)
    location = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    is_new_site = Column(Boolean, default=False, nullable=False)
    team_leader_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    status = Column(Enum(TeamStatus), default=TeamStatus.ACTIVE, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    team_leader = relationship("User", foreign_keys=[team_leader_id])
    members = relationship("User", secondary=team_members, order_by="User.id")
    racks = relationship("Rack", back_populates="team")

    @property
    def member_ids(self):
        return {member.id for member in self.members}
