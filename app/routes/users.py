"""User routes."""
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.auth import get_password_hash, require_admin, require_leader
from app.database import get_db, commit_or_fail
from app.errors import Conflict
from app.models.user import User, UserRole
from app.schemas.user import UserCreate, UserEnvelope, UserListEnvelope

router = APIRouter(prefix="/users", tags=["Users"])
logger = structlog.get_logger(__name__)


@router.get("/", response_model=UserListEnvelope)
async def list_users(
    role: Optional[UserRole] = Query(None, description="Filter by role"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_leader)
):
    """List users, e.g. to pick team members (admin or team leader)."""
    query = db.query(User).filter(User.is_active.is_(True))
    if role:
        query = query.filter(User.role == role)
    users = query.order_by(User.name, User.id).all()
    return {"success": True, "count": len(users), "users": users}


@router.post("/", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Create a user with a fixed role (admin only)."""
    if db.query(User).filter(User.email == user_data.email).first():
        raise Conflict("Email already registered")

    user = User(
        name=user_data.name,
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
        role=user_data.role,
        is_active=True,
    )
    db.add(user)
    commit_or_fail(db, "creating user")
    db.refresh(user)

    logger.info("user_created", user_id=user.id, role=user.role.value)
    return {"success": True, "message": "User created successfully", "user": user}
