"""Database engine, session factory and declarative base."""
import structlog
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.config import settings
from app.errors import StoreFailure

logger = structlog.get_logger(__name__)

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args, echo=settings.DEBUG)

# autoflush=False: flushes happen explicitly before ids are needed
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Yield a session per request; always closed on exit."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit_or_fail(db: Session, action: str) -> None:
    """Commit the current transaction, rolling back and raising StoreFailure on error."""
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("store_failure", action=action, error=str(exc))
        raise StoreFailure(f"Server error {action}") from exc
