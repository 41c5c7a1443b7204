"""Tests for app.routes.exported_racks - export snapshot routes."""
from app.models.exported_rack import ExportedRackSnapshot


def _snapshot_lines(count=2):
    return [
        {
            "sNo": i + 1,
            "location": "SPARES",
            "rackNo": f"R{i}",
            "partNo": f"P-{i}",
            "nextQty": i,
            "mrp": 10.0,
            "ndp": 8.0,
            "materialDescription": f"Part {i}",
        }
        for i in range(count)
    ]


class TestCreateSnapshots:
    """Tests for POST /api/exported-racks-snapshot/."""

    def test_leader_exports_own_team(self, client, auth_headers, db, team, leader):
        response = client.post(
            "/api/exported-racks-snapshot/",
            json={"snapshots": _snapshot_lines(3), "teamId": team.id, "siteName": team.site_name},
            headers=auth_headers(leader),
        )
        assert response.status_code == 201
        assert response.json()["count"] == 3

        rows = db.query(ExportedRackSnapshot).all()
        assert len(rows) == 3
        assert all(r.exported_by_id == leader.id and r.team_id == team.id for r in rows)
        assert all(r.exported_at is not None for r in rows)

    def test_other_leader_forbidden(self, client, auth_headers, team, other_leader):
        response = client.post(
            "/api/exported-racks-snapshot/",
            json={"snapshots": _snapshot_lines(), "teamId": team.id, "siteName": team.site_name},
            headers=auth_headers(other_leader),
        )
        assert response.status_code == 403

    def test_member_forbidden(self, client, auth_headers, team, member):
        response = client.post(
            "/api/exported-racks-snapshot/",
            json={"snapshots": _snapshot_lines(), "teamId": team.id, "siteName": team.site_name},
            headers=auth_headers(member),
        )
        assert response.status_code == 403

    def test_empty_snapshots_rejected(self, client, auth_headers, team, admin):
        response = client.post(
            "/api/exported-racks-snapshot/",
            json={"snapshots": [], "teamId": team.id, "siteName": team.site_name},
            headers=auth_headers(admin),
        )
        assert response.status_code == 400

    def test_team_and_site_required(self, client, auth_headers, admin):
        response = client.post(
            "/api/exported-racks-snapshot/",
            json={"snapshots": _snapshot_lines()},
            headers=auth_headers(admin),
        )
        assert response.status_code == 400

    def test_unknown_team(self, client, auth_headers, admin):
        response = client.post(
            "/api/exported-racks-snapshot/",
            json={"snapshots": _snapshot_lines(), "teamId": 999, "siteName": "Ghost"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 404


class TestListSnapshots:
    """Tests for GET /api/exported-racks-snapshot/."""

    def test_lists_in_serial_order(self, client, auth_headers, team, admin, leader):
        client.post(
            "/api/exported-racks-snapshot/",
            json={"snapshots": _snapshot_lines(3), "teamId": team.id, "siteName": team.site_name},
            headers=auth_headers(admin),
        )
        response = client.get(f"/api/exported-racks-snapshot/?teamId={team.id}", headers=auth_headers(leader))
        assert response.status_code == 200
        assert [s["sNo"] for s in response.json()["data"]] == [1, 2, 3]

    def test_other_leader_forbidden(self, client, auth_headers, team, other_leader):
        response = client.get(f"/api/exported-racks-snapshot/?teamId={team.id}", headers=auth_headers(other_leader))
        assert response.status_code == 403
