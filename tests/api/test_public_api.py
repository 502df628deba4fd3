"""Tests for the public profile page and service endpoints."""

from linkfolio.core import database


async def test_public_page_shows_active_links_only(api_client, alice, make_link):
    await make_link(alice, "A")
    await make_link(alice, "B", is_active=False)
    await make_link(alice, "C")

    response = await api_client.get("/api/v1/public/alice")

    assert response.status_code == 200
    body = response.json()
    assert body["profile"] == {
        "username": "alice",
        "display_name": "Alice",
        "bio": "alice's links",
        "avatar_url": "https://avatars.example.com/alice.png",
    }
    assert [(link["title"], link["position"]) for link in body["links"]] == [("A", 0), ("C", 2)]


async def test_public_page_needs_no_auth_and_hides_owner_fields(api_client, alice, make_link):
    await make_link(alice, "A")

    response = await api_client.get("/api/v1/public/alice")

    link = response.json()["links"][0]
    assert set(link) == {"id", "title", "url", "icon", "position"}


async def test_public_page_unknown_username(api_client):
    response = await api_client.get("/api/v1/public/nobody")

    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


async def test_public_page_reflects_toggle(api_client, alice, alice_headers, make_link):
    link = await make_link(alice, "A")

    await api_client.post(f"/api/v1/links/{link.id}/toggle", headers=alice_headers)

    response = await api_client.get("/api/v1/public/alice")
    assert response.json()["links"] == []


async def test_health(api_client):
    response = await api_client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "ok"}


async def test_health_reports_database_down(api_client, monkeypatch):
    async def unavailable() -> bool:
        return False

    monkeypatch.setattr("linkfolio.api.v1.router.check_database", unavailable)

    response = await api_client.get("/api/v1/health")

    assert response.status_code == 503
    assert response.json()["database"] == "unavailable"


async def test_check_database():
    assert await database.check_database() is True


async def test_security_headers_and_request_id(api_client):
    response = await api_client.get("/", headers={"X-Request-ID": "req-123"})

    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "req-123"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
