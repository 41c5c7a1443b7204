"""User model and role enumeration."""
import enum
from sqlalchemy import Column, Integer, String, Enum, DateTime, Boolean
from sqlalchemy.sql import func

from app.database import Base


class UserRole(str, enum.Enum):
    """User roles for the rack inventory system."""
    ADMIN = "admin"
    TEAM_LEADER = "team_leader"
    TEAM_MEMBER = "team_member"


class User(Base):
    """User model for authentication and authorization.

    The role is fixed at creation; nothing in the API changes it.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), default=UserRole.TEAM_MEMBER, nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
