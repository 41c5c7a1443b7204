"""Authentication routes."""
import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth import authenticate_user, create_access_token, get_current_user
from app.database import get_db
from app.errors import Unauthenticated
from app.models.user import User
from app.schemas.user import LoginRequest, Token, UserEnvelope

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = structlog.get_logger(__name__)


@router.post("/login", response_model=Token)
async def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for a bearer token."""
    user = authenticate_user(db, credentials.email, credentials.password)
    if not user:
        logger.info("login_failed", email=credentials.email)
        raise Unauthenticated("Invalid email or password")

    logger.info("login_succeeded", user_id=user.id)
    return {"access_token": create_access_token(user), "token_type": "bearer", "user": user}


@router.get("/me", response_model=UserEnvelope)
async def read_current_user(current_user: User = Depends(get_current_user)):
    """Get the calling user."""
    return {"success": True, "user": current_user}
