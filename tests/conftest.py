"""Pytest configuration and fixtures for rack inventory tests.

Every test gets a fresh in-memory SQLite database shared between the test
session (for seeding and assertions) and the request sessions created by
the API through the ``get_db`` override.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.auth import create_access_token, get_password_hash  # noqa: E402
from app.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.master_description import MasterDescription  # noqa: E402
from app.models.rack import Rack, RackLocation  # noqa: E402
from app.models.team import Team, TeamStatus  # noqa: E402
from app.models.user import User, UserRole  # noqa: E402

TEST_PASSWORD = "secret123"
HASHED_PASSWORD = get_password_hash(TEST_PASSWORD)


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    """Session for seeding and checking data directly."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    """Test client wired to the test database."""
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Build bearer headers for a user."""
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user)}"}
    return _headers


@pytest.fixture
def make_user(db):
    """Factory for users with a known password."""
    def _make(name: str, role: UserRole, email: str = None) -> User:
        user = User(
            name=name,
            email=email or f"{name.lower().replace(' ', '.')}@example.com",
            hashed_password=HASHED_PASSWORD,
            role=role,
            is_active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def admin(make_user) -> User:
    return make_user("Admin", UserRole.ADMIN)


@pytest.fixture
def leader(make_user) -> User:
    return make_user("Leader One", UserRole.TEAM_LEADER)


@pytest.fixture
def other_leader(make_user) -> User:
    return make_user("Leader Two", UserRole.TEAM_LEADER)


@pytest.fixture
def member(make_user) -> User:
    return make_user("Member One", UserRole.TEAM_MEMBER)


@pytest.fixture
def other_member(make_user) -> User:
    return make_user("Member Two", UserRole.TEAM_MEMBER)


@pytest.fixture
def make_team(db):
    """Factory for teams seeded straight into the database."""
    def _make(site_name: str, leader: User = None, members=(), status=TeamStatus.ACTIVE) -> Team:
        team = Team(
            site_name=site_name,
            location="DL",
            description=f"{site_name} crew",
            team_leader_id=leader.id if leader else None,
            members=list(members),
            status=status,
        )
        db.add(team)
        db.commit()
        db.refresh(team)
        return team
    return _make


@pytest.fixture
def team(make_team, leader, member) -> Team:
    """Active team led by ``leader`` with ``member`` on it."""
    return make_team("Delhi-1", leader=leader, members=[member])


@pytest.fixture
def make_rack(db):
    """Factory for racks seeded straight into the database."""
    def _make(team: Team, scanned_by: User, rack_no: str = "R1", part_no: str = "P-100", next_qty: int = 5,
              location: RackLocation = RackLocation.SPARES, **extra) -> Rack:
        rack = Rack(
            rack_no=rack_no,
            part_no=part_no,
            next_qty=next_qty,
            location=location,
            site_name=team.site_name,
            team_id=team.id,
            scanned_by_id=scanned_by.id,
            **extra,
        )
        db.add(rack)
        db.commit()
        db.refresh(rack)
        return rack
    return _make


@pytest.fixture
def make_master(db):
    """Factory for master description rows."""
    def _make(part_no: str, description: str, ndp: float = 0, mrp: float = 0, **extra) -> MasterDescription:
        row = MasterDescription(part_no=part_no, description=description, ndp=ndp, mrp=mrp, **extra)
        db.add(row)
        db.commit()
        db.refresh(row)
        return row
    return _make
