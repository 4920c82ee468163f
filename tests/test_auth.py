"""Basic-auth guard on the mutating routes."""

import pytest
from pokemon_api import service as service_mod

from conftest import AUTH, make_pokemon


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,path",
    [("post", "/pokemon"), ("put", "/pokemon/1"), ("delete", "/pokemon/1")],
)
async def test_mutating_routes_require_credentials(test_client, method, path):
    kwargs = {} if method == "delete" else {"json": make_pokemon(1)}
    r = await getattr(test_client, method)(path, **kwargs)
    assert r.status_code == 401
    assert r.headers["www-authenticate"].startswith("Basic")
    assert r.headers["content-type"].startswith("application/problem+json")


@pytest.mark.asyncio
@pytest.mark.parametrize("auth", [("ash", "wrong"), ("gary", AUTH[1]), ("", "")])
async def test_wrong_credentials_rejected(test_client, auth):
    r = await test_client.post("/pokemon", json=make_pokemon(1), auth=auth)
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_auth_checked_before_validation(test_client, monkeypatch):
    """An invalid payload without credentials gets 401, never reaching validation."""
    called = {"n": 0}
    real = service_mod.validate_data

    def spy(data):
        called["n"] += 1
        return real(data)

    monkeypatch.setattr(service_mod, "validate_data", spy)

    r = await test_client.post("/pokemon", json={"name": ""})
    assert r.status_code == 401
    assert called["n"] == 0


@pytest.mark.asyncio
async def test_listing_is_public(test_client):
    r = await test_client.get("/pokemon")
    assert r.status_code == 200
    assert r.json() == {"pokemons": [], "page": 1}
