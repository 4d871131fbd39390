from portfolio_backend.models.homepage_config import HomepageConfig

BASE = "/api/homepage-config"


def _create(client, headers, **payload):
    response = client.post(BASE, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_public_get_returns_default_config(client):
    response = client.get(BASE)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["isActive"] is True
    assert data["order"] == ["hero", "about", "projects", "skills", "contact"]
    assert data["sections"]["hero"]["enabled"] is True
    assert "createdAt" in data and "updatedAt" in data

    # Una segunda lectura no crea otra configuración
    assert client.get(BASE).json()["data"]["id"] == data["id"]


def test_admin_routes_require_admin(client, user_headers):
    assert client.get(f"{BASE}/all").status_code == 401
    assert client.post(BASE, json={}).status_code == 401
    assert client.get(f"{BASE}/all", headers=user_headers).status_code == 403
    assert client.post(f"{BASE}/1/activate", headers=user_headers).status_code == 403


def test_create_is_inactive_by_default(client, admin_headers):
    active = client.get(BASE).json()["data"]

    created = _create(
        client,
        admin_headers,
        sections={"hero": {"title": "Jane Doe", "subtitle": "Backend developer"}},
        seo={"title": "Jane Doe", "ogImage": "https://example.com/og.png"},
    )

    assert created["isActive"] is False
    assert created["sections"]["hero"]["title"] == "Jane Doe"
    assert created["seo"] == {"title": "Jane Doe", "ogImage": "https://example.com/og.png"}
    assert client.get(BASE).json()["data"]["id"] == active["id"]


def test_activate_switches_the_public_config(client, admin_headers, db):
    first = client.get(BASE).json()["data"]
    second = _create(client, admin_headers, order=["hero", "contact"])

    response = client.post(f"{BASE}/{second['id']}/activate", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["data"]["isActive"] is True
    public = client.get(BASE).json()["data"]
    assert public["id"] == second["id"]
    assert public["order"] == ["hero", "contact"]

    all_configs = client.get(f"{BASE}/all", headers=admin_headers).json()["data"]
    assert {c["id"]: c["isActive"] for c in all_configs} == {first["id"]: False, second["id"]: True}
    assert db.query(HomepageConfig).filter(HomepageConfig.is_active.is_(True)).count() == 1


def test_create_active_replaces_current(client, admin_headers):
    client.get(BASE)

    created = _create(client, admin_headers, isActive=True)

    assert client.get(BASE).json()["data"]["id"] == created["id"]


def test_get_by_id(client, admin_headers):
    created = _create(client, admin_headers)

    response = client.get(f"{BASE}/{created['id']}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["data"]["id"] == created["id"]


def test_get_missing_config(client, admin_headers):
    response = client.get(f"{BASE}/999", headers=admin_headers)

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Homepage configuration not found"}


def test_update_with_unknown_section(client, admin_headers):
    config = client.get(BASE).json()["data"]

    response = client.post(
        f"{BASE}/{config['id']}/update",
        json={"sections": {"blog": {"enabled": True}}},
        headers=admin_headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "blog" in body["message"]
    assert client.get(BASE).json()["data"]["sections"] == config["sections"]


def test_update_with_duplicate_order(client, admin_headers):
    config = client.get(BASE).json()["data"]

    response = client.post(
        f"{BASE}/{config['id']}/update",
        json={"order": ["hero", "hero"]},
        headers=admin_headers,
    )

    assert response.status_code == 400


def test_update_merges_sections(client, admin_headers):
    config = client.get(BASE).json()["data"]

    response = client.post(
        f"{BASE}/{config['id']}/update",
        json={"sections": {"about": {"enabled": False}}, "branding": {"logo": "https://example.com/logo.svg"}},
        headers=admin_headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["sections"]["about"]["enabled"] is False
    assert data["sections"]["about"]["title"] == config["sections"]["about"]["title"]
    assert data["branding"] == {"logo": "https://example.com/logo.svg"}
    assert data["isActive"] is True


def test_delete_active_config_is_a_conflict(client, admin_headers):
    config = client.get(BASE).json()["data"]

    response = client.post(f"{BASE}/{config['id']}/delete", headers=admin_headers)

    assert response.status_code == 409
    assert response.json()["success"] is False
    assert client.get(BASE).json()["data"]["id"] == config["id"]


def test_delete_inactive_config(client, admin_headers):
    client.get(BASE)
    created = _create(client, admin_headers)

    response = client.post(f"{BASE}/{created['id']}/delete", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Homepage configuration deleted successfully"}
    assert client.get(f"{BASE}/{created['id']}", headers=admin_headers).status_code == 404


def test_activate_missing_config(client, admin_headers):
    assert client.post(f"{BASE}/999/activate", headers=admin_headers).status_code == 404
