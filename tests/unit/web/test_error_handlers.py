"""Tests for app.errors - envelope rendering of store-layer failures."""
import pytest
from sqlalchemy.exc import OperationalError

from app.database import get_db
from app.main import app


@pytest.fixture
def failing_client(client, session_factory):
    """Client whose session fails every query after the principal lookup."""
    def override_get_db():
        session = session_factory()
        real_query = session.query
        calls = []

        def flaky_query(*args, **kwargs):
            calls.append(args)
            if len(calls) > 1:
                raise OperationalError("SELECT", {}, Exception("database is locked"))
            return real_query(*args, **kwargs)

        session.query = flaky_query
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    return client


class TestStoreFailureEnvelope:

    def test_read_failure_renders_envelope(self, failing_client, auth_headers, admin):
        response = failing_client.get("/api/racks/", headers=auth_headers(admin))
        assert response.status_code == 500
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == {"success": False, "message": "Server error"}

    def test_lookup_failure_renders_envelope(self, failing_client, auth_headers, admin):
        response = failing_client.get("/api/teams/1", headers=auth_headers(admin))
        assert response.status_code == 500
        assert response.json()["success"] is False
