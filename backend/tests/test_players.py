import pytest
from httpx import ASGITransport, AsyncClient

from clubrank.config import API_PREFIX

BASE = f"{API_PREFIX}/v1/players"


@pytest.fixture
async def client(seeded):
    from clubrank.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver"
    ) as ac:
        yield ac


@pytest.mark.anyio
async def test_create_player(client):
    resp = await client.post(
        BASE,
        json={"name": "  Frida ", "email": "Frida@Example.com", "clubId": "c1"},
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["name"] == "Frida"
    assert data["email"] == "frida@example.com"
    assert data["clubId"] == "c1"

    resp = await client.get(f"{BASE}/{data['id']}")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Frida"


@pytest.mark.anyio
async def test_create_player_requires_known_club(client):
    resp = await client.post(BASE, json={"name": "Frida", "clubId": "nope"})
    assert resp.status_code == 404
    assert resp.json()["code"] == "club_not_found"

    resp = await client.post(BASE, json={"name": "Frida", "email": "nope", "clubId": "c1"})
    assert resp.status_code == 422


@pytest.mark.anyio
async def test_list_players_filters(client):
    resp = await client.get(BASE, params={"clubId": "c2"})
    data = resp.json()
    assert data["total"] == 1
    assert [p["id"] for p in data["players"]] == ["p9"]

    resp = await client.get(BASE, params={"clubId": "c1", "limit": 2})
    data = resp.json()
    assert data["total"] == 5
    assert [p["name"] for p in data["players"]] == ["Alice", "Bob"]

    resp = await client.get(BASE, params={"q": "car"})
    assert [p["id"] for p in resp.json()["players"]] == ["p3"]


@pytest.mark.anyio
async def test_get_unknown_player(client):
    resp = await client.get(f"{BASE}/nope")
    assert resp.status_code == 404
    assert resp.json()["code"] == "player_not_found"
