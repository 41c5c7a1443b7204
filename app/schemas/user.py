"""User schemas for request/response validation."""
from datetime import datetime
from typing import Optional, List
from pydantic import EmailStr, Field

from app.models.user import UserRole
from app.schemas.common import CamelModel


class UserSummary(CamelModel):
    """User as embedded in teams, racks and ledgers."""
    id: int
    name: str
    email: str
    role: UserRole


class UserCreate(CamelModel):
    """Schema for creating a user."""
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)
    role: UserRole = UserRole.TEAM_MEMBER


class UserResponse(UserSummary):
    """Schema for user response."""
    is_active: bool
    created_at: Optional[datetime] = None


class UserEnvelope(CamelModel):
    success: bool = True
    message: Optional[str] = None
    user: UserResponse


class UserListEnvelope(CamelModel):
    success: bool = True
    count: int
    users: List[UserResponse]


class LoginRequest(CamelModel):
    email: str
    password: str


class Token(CamelModel):
    """JWT token schema."""
    success: bool = True
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
