from datetime import datetime, timedelta

import pytest

from portfolio_backend.models.visitor import Visitor
from portfolio_backend.security import create_access_token

CLIENT_HEADERS = {"X-Forwarded-For": "203.0.113.5, 10.0.0.1", "User-Agent": "TestAgent/1.0"}
VISITOR_ID = "0cae0f48929c9868f63d64b07c624fa8"


def _seed_visitors(db, count: int) -> None:
    start = datetime(2024, 1, 1, 12, 0, 0)
    for i in range(count):
        seen = start + timedelta(minutes=i)
        db.add(
            Visitor(
                visitor_id=f"{i:032x}",
                ip_address=f"10.0.{i // 256}.{i % 256}",
                user_agent="SeedAgent/1.0",
                last_visit=seen,
                visit_count=1 + i % 3,
                created_at=seen,
                updated_at=seen,
            )
        )
    db.commit()


def test_track_first_visit(client, db):
    response = client.post("/api/visitors/track", headers=CLIENT_HEADERS)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"] == {"isNewVisitor": True, "uniqueVisitors": 1, "totalVisits": 1}

    record = db.query(Visitor).one()
    assert record.visitor_id == VISITOR_ID
    assert record.ip_address == "203.0.113.5"
    assert record.user_agent == "TestAgent/1.0"


def test_track_repeat_within_window_is_not_new(client):
    client.post("/api/visitors/track", headers=CLIENT_HEADERS)

    response = client.post("/api/visitors/track", headers=CLIENT_HEADERS)

    assert response.json()["data"] == {"isNewVisitor": False, "uniqueVisitors": 1, "totalVisits": 1}


def test_track_uses_real_ip_header_when_no_forwarded_for(client, db):
    client.post("/api/visitors/track", headers={"X-Real-IP": "198.51.100.7", "User-Agent": "TestAgent/1.0"})

    assert db.query(Visitor).one().ip_address == "198.51.100.7"


def test_count_is_public(client):
    client.post("/api/visitors/track", headers=CLIENT_HEADERS)
    client.post("/api/visitors/track", headers={**CLIENT_HEADERS, "User-Agent": "OtherAgent/2.0"})

    response = client.get("/api/visitors/count")

    assert response.status_code == 200
    assert response.json()["data"] == {"uniqueVisitors": 2, "totalVisits": 2}


def test_count_on_empty_store(client):
    assert client.get("/api/visitors/count").json()["data"] == {"uniqueVisitors": 0, "totalVisits": 0}


def test_list_requires_token(client):
    response = client.get("/api/visitors")

    assert response.status_code == 401
    body = response.json()
    assert body == {"success": False, "message": "No token provided"}
    assert response.headers["www-authenticate"] == "Bearer"


def test_list_rejects_invalid_token(client):
    response = client.get("/api/visitors", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token"


def test_list_rejects_expired_token(client):
    token = create_access_token("admin-1", expires_delta=timedelta(seconds=-10))

    response = client.get("/api/visitors", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_list_rejects_non_admin(client, user_headers):
    response = client.get("/api/visitors", headers=user_headers)

    assert response.status_code == 403
    assert response.json() == {"success": False, "message": "Admin access required"}


def test_list_default_page(client, db, admin_headers):
    _seed_visitors(db, 30)

    response = client.get("/api/visitors", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 30
    assert data["totalPages"] == 2
    assert data["currentPage"] == 1
    assert len(data["visitors"]) == 25
    # Más reciente primero
    assert data["visitors"][0]["ipAddress"] == "10.0.0.29"
    assert set(data["visitors"][0]) == {
        "id",
        "visitorId",
        "ipAddress",
        "userAgent",
        "lastVisit",
        "visitCount",
        "createdAt",
        "updatedAt",
    }


@pytest.mark.parametrize(
    "limit, expected_rows, expected_pages",
    [
        (500, 100, 2),
        (0, 25, 5),
        (-3, 25, 5),
    ],
)
def test_list_limit_is_clamped(client, db, admin_headers, limit, expected_rows, expected_pages):
    _seed_visitors(db, 120)

    response = client.get(f"/api/visitors?limit={limit}", headers=admin_headers)

    data = response.json()["data"]
    assert data["total"] == 120
    assert len(data["visitors"]) == expected_rows
    assert data["totalPages"] == expected_pages


def test_list_page_below_one_is_first_page(client, db, admin_headers):
    _seed_visitors(db, 3)

    data = client.get("/api/visitors?page=0", headers=admin_headers).json()["data"]

    assert data["currentPage"] == 1
    assert len(data["visitors"]) == 3


def test_list_sorted_ascending(client, db, admin_headers):
    _seed_visitors(db, 5)

    data = client.get("/api/visitors?sortBy=createdAt&sortOrder=asc", headers=admin_headers).json()["data"]

    assert [v["ipAddress"] for v in data["visitors"]] == [f"10.0.0.{i}" for i in range(5)]


def test_list_unknown_sort_field_is_not_an_error(client, db, admin_headers):
    _seed_visitors(db, 5)

    response = client.get("/api/visitors?sortBy=password&sortOrder=asc", headers=admin_headers)

    assert response.status_code == 200
    assert [v["ipAddress"] for v in response.json()["data"]["visitors"]] == [f"10.0.0.{i}" for i in range(5)]


def test_list_with_non_numeric_page_is_a_validation_error(client, admin_headers):
    response = client.get("/api/visitors?page=abc", headers=admin_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "data" not in body
    assert body["errors"][0]["field"] == "page"
