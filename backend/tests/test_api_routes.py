from __future__ import annotations

from datetime import date
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from maintrack.auth import create_access_token, get_password_hash
from maintrack.config import Settings
from maintrack.database import get_db
from maintrack.main import create_app


@pytest.fixture()
def client(session_factory):
    app = create_app(Settings(DATABASE_URL="sqlite://", ENV="test"))

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    return TestClient(app)


def _headers(user) -> dict[str, str]:
    token = create_access_token({"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def site(factory):
    mechanics = factory.team("Mechanics")
    mechanic = factory.user("technician", mechanics)
    return {
        "mechanics": mechanics,
        "admin": factory.user("admin"),
        "manager": factory.user("manager"),
        "mechanic": mechanic,
        "employee": factory.user("portal"),
        "lathe": factory.equipment("Lathe", team=mechanics, technician=mechanic),
        "paint_shop": factory.work_center("Paint Shop"),
    }


def test_create_request_returns_auto_filled_response(client, site) -> None:
    response = client.post(
        "/api/v1/maintenance-requests",
        json={"subject": "Lathe squeaks", "type": "corrective", "equipment_id": str(site["lathe"].id)},
        headers=_headers(site["employee"]),
    )

    assert response.status_code == 201
    payload = response.json()
    assert payload["state"] == "new"
    assert payload["category"] == "equipment"
    assert payload["team_id"] == str(site["mechanics"].id)
    assert payload["assigned_technician_id"] == str(site["mechanic"].id)
    assert payload["allowed_transitions"] == ["in_progress", "scrap"]
    assert payload["auto_filled"]["team"] is True
    assert payload["auto_filled"]["suggested_technician"] == site["mechanic"].name
    assert payload["equipment"]["name"] == "Lathe"


def test_work_center_without_team_returns_problem_details(client, site) -> None:
    response = client.post(
        "/api/v1/maintenance-requests",
        json={
            "subject": "Booth filter clogged",
            "type": "corrective",
            "category": "work_center",
            "work_center_id": str(site["paint_shop"].id),
        },
        headers=_headers(site["manager"]),
    )

    assert response.status_code == 400
    assert response.headers["content-type"].startswith("application/problem+json")
    payload = response.json()
    assert payload["code"] == "VALIDATION_ERROR"
    assert "Paint Shop" in payload["detail"]


def test_list_and_transition_flow(client, site, factory) -> None:
    request = factory.request(
        "Coolant leak",
        team=site["mechanics"],
        created_by=site["manager"],
        equipment=site["lathe"],
        technician=site["mechanic"],
    )
    mechanic_headers = _headers(site["mechanic"])

    listed = client.get("/api/v1/maintenance-requests?state=new&limit=5", headers=mechanic_headers)
    assert listed.status_code == 200
    body = listed.json()
    assert [item["subject"] for item in body["items"]] == ["Coolant leak"]
    assert body["pagination"] == {"page": 1, "limit": 5, "total": 1, "total_pages": 1}

    invalid = client.put(
        f"/api/v1/maintenance-requests/{request.id}/state",
        json={"state": "repaired", "duration_hours": 2},
        headers=mechanic_headers,
    )
    assert invalid.status_code == 400
    assert invalid.json()["code"] == "INVALID_STATE_TRANSITION"

    started = client.put(
        f"/api/v1/maintenance-requests/{request.id}/state",
        json={"state": "in_progress"},
        headers=mechanic_headers,
    )
    assert started.status_code == 200
    assert started.json()["allowed_transitions"] == ["repaired", "scrap"]

    done = client.put(
        f"/api/v1/maintenance-requests/{request.id}/state",
        json={"state": "repaired", "duration_hours": 2},
        headers=mechanic_headers,
    )
    assert done.status_code == 200
    assert done.json()["state"] == "repaired"
    assert done.json()["duration_hours"] == 2
    assert done.json()["allowed_transitions"] == []

    history = client.get(
        f"/api/v1/equipment/{site['lathe'].id}/maintenance-requests",
        headers=_headers(site["admin"]),
    )
    assert history.status_code == 200
    assert history.json()["pagination"]["total"] == 1


def test_portal_user_cannot_read_foreign_request(client, site, factory) -> None:
    request = factory.request("Manager note", team=site["mechanics"], created_by=site["manager"], equipment=site["lathe"])

    response = client.get(f"/api/v1/maintenance-requests/{request.id}", headers=_headers(site["employee"]))

    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"


def test_invalid_filter_value_is_validation_error(client, site) -> None:
    response = client.get("/api/v1/maintenance-requests?state=archived", headers=_headers(site["admin"]))

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_admin_deletes_request(client, site, factory) -> None:
    request = factory.request("Obsolete", team=site["mechanics"], created_by=site["manager"], equipment=site["lathe"])

    forbidden = client.delete(f"/api/v1/maintenance-requests/{request.id}", headers=_headers(site["manager"]))
    assert forbidden.status_code == 403

    deleted = client.delete(f"/api/v1/maintenance-requests/{request.id}", headers=_headers(site["admin"]))
    assert deleted.status_code == 204

    missing = client.get(f"/api/v1/maintenance-requests/{request.id}", headers=_headers(site["admin"]))
    assert missing.status_code == 404


def test_admin_updates_technician_teams(client, site, factory) -> None:
    electrical = factory.team("Electrical")

    response = client.put(
        f"/api/v1/admin/technicians/{site['mechanic'].id}/teams",
        json={"team_ids": [str(electrical.id)]},
        headers=_headers(site["admin"]),
    )

    assert response.status_code == 200
    assert [team["name"] for team in response.json()["teams"]] == ["Electrical"]


def test_equipment_listing_is_scoped(client, site, factory) -> None:
    factory.equipment("Generator", team=factory.team("Power"))

    response = client.get("/api/v1/equipment", headers=_headers(site["mechanic"]))

    assert response.status_code == 200
    assert [item["name"] for item in response.json()["items"]] == ["Lathe"]


def test_requests_without_token_are_rejected(client) -> None:
    response = client.get("/api/v1/maintenance-requests")

    assert response.status_code in (401, 403)


def test_signup_then_login(client, site) -> None:
    signup = client.post(
        "/api/v1/auth/signup",
        json={"name": "Jamie", "email": "jamie@example.com", "password": "s3cretpass"},
    )
    assert signup.status_code == 201
    assert signup.json()["user"]["role"] == "portal"
    assert [item["name"] for item in signup.json()["assigned_equipment"]] == ["Lathe"]

    login = client.post(
        "/api/v1/auth/login",
        json={"email": "JAMIE@example.com", "password": "s3cretpass"},
    )
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["email"] == "jamie@example.com"

    wrong = client.post("/api/v1/auth/login", json={"email": "jamie@example.com", "password": "nope"})
    assert wrong.status_code == 401


def test_password_hash_roundtrip_is_verified_on_login(client, factory) -> None:
    user = factory.user("manager")
    user.password_hash = get_password_hash("manager-pass")
    factory.db.commit()

    response = client.post("/api/v1/auth/login", json={"email": user.email, "password": "manager-pass"})

    assert response.status_code == 200
    assert response.json()["user"]["role"] == "manager"


@pytest.mark.parametrize("duration", [True, "5", "2.5"])
def test_non_numeric_duration_is_rejected(client, site, factory, duration) -> None:
    request = factory.request(
        "Belt worn",
        team=site["mechanics"],
        created_by=site["manager"],
        equipment=site["lathe"],
        state="in_progress",
        technician=site["mechanic"],
    )
    headers = _headers(site["mechanic"])

    response = client.put(
        f"/api/v1/maintenance-requests/{request.id}/state",
        json={"state": "repaired", "duration_hours": duration},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    current = client.get(f"/api/v1/maintenance-requests/{request.id}", headers=headers).json()
    assert current["state"] == "in_progress"
    assert current["duration_hours"] is None


@pytest.mark.parametrize(
    ("path", "expected_limit"),
    [
        ("/api/v1/maintenance-requests?limit=500&page=0", 100),
        ("/api/v1/maintenance-requests?limit=0", 1),
        ("/api/v1/equipment?limit=500", 100),
        ("/api/v1/equipment?limit=-3", 1),
    ],
)
def test_out_of_range_pagination_is_clamped(client, site, path, expected_limit) -> None:
    response = client.get(path, headers=_headers(site["admin"]))

    assert response.status_code == 200
    pagination = response.json()["pagination"]
    assert pagination["limit"] == expected_limit
    assert pagination["page"] == 1


def test_out_of_range_history_pagination_is_clamped(client, site) -> None:
    response = client.get(
        f"/api/v1/equipment/{site['lathe'].id}/maintenance-requests?limit=1000",
        headers=_headers(site["admin"]),
    )

    assert response.status_code == 200
    assert response.json()["pagination"]["limit"] == 100


def test_work_center_routes(client, site, factory) -> None:
    assembly = factory.work_center("Assembly", team=site["mechanics"])
    mechanic_headers = _headers(site["mechanic"])

    listed = client.get("/api/v1/work-centers", headers=mechanic_headers)
    assert listed.status_code == 200
    assert [item["name"] for item in listed.json()] == ["Assembly", "Paint Shop"]
    assert listed.json()[0]["default_team"]["name"] == "Mechanics"
    assert listed.json()[1]["default_team"] is None

    filtered = client.get(
        f"/api/v1/work-centers?team_id={site['mechanics'].id}",
        headers=mechanic_headers,
    )
    assert [item["id"] for item in filtered.json()] == [str(assembly.id)]

    detail = client.get(f"/api/v1/work-centers/{site['paint_shop'].id}", headers=mechanic_headers)
    assert detail.status_code == 200
    assert detail.json()["code"] == site["paint_shop"].code

    missing = client.get(f"/api/v1/work-centers/{uuid4()}", headers=mechanic_headers)
    assert missing.status_code == 404
    assert missing.json()["code"] == "NOT_FOUND"

    forbidden = client.get("/api/v1/work-centers", headers=_headers(site["employee"]))
    assert forbidden.status_code == 403


def test_team_routes(client, site, factory) -> None:
    factory.team("Electrical")

    admin_view = client.get("/api/v1/teams", headers=_headers(site["admin"]))
    assert admin_view.status_code == 200
    assert [team["name"] for team in admin_view.json()] == ["Electrical", "Mechanics"]
    assert admin_view.json()[1]["members"] == [
        {
            "id": str(site["mechanic"].id),
            "name": site["mechanic"].name,
            "email": site["mechanic"].email,
            "role": "technician",
        }
    ]

    mechanic_view = client.get("/api/v1/teams", headers=_headers(site["mechanic"]))
    assert [team["name"] for team in mechanic_view.json()] == ["Mechanics"]

    assert client.get("/api/v1/teams", headers=_headers(site["employee"])).status_code == 403


def test_calendar_routes(client, site, factory) -> None:
    factory.request(
        "Quarterly lathe PM",
        team=site["mechanics"],
        created_by=site["manager"],
        equipment=site["lathe"],
        technician=site["mechanic"],
        type="preventive",
        scheduled_date=date(2026, 5, 4),
    )
    headers = _headers(site["manager"])

    response = client.get("/api/v1/calendar/scheduled?month=5&year=2026", headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["month"] == 5
    assert body["year"] == 2026
    assert body["total_requests"] == 1
    assert [item["subject"] for item in body["requests_by_date"]["2026-05-04"]] == ["Quarterly lathe PM"]

    missing = client.get("/api/v1/calendar/scheduled?month=5", headers=headers)
    assert missing.status_code == 400
    assert missing.json()["code"] == "VALIDATION_ERROR"

    assert client.get("/api/v1/calendar/scheduled?month=13&year=2026", headers=headers).status_code == 400
    assert client.get("/api/v1/calendar/scheduled?month=5&year=2026", headers=_headers(site["employee"])).status_code == 403

    technicians = client.get("/api/v1/calendar/technicians", headers=headers)
    assert [item["id"] for item in technicians.json()] == [str(site["mechanic"].id)]
    assert client.get("/api/v1/calendar/technicians", headers=_headers(site["mechanic"])).json() == []
