"""Prometheus metrics: request middleware, mutation/validation counters, /metrics."""

import pytest
from prometheus_client import REGISTRY

from conftest import AUTH, make_pokemon


def _value(name, labels):
    return REGISTRY.get_sample_value(name, labels) or 0.0


@pytest.mark.asyncio
async def test_mutation_and_validation_counters(test_client):
    created_before = _value("pokemon_mutations_total", {"op": "create"})
    deleted_before = _value("pokemon_mutations_total", {"op": "delete"})
    rejected_before = _value("pokemon_validation_failures_total", {"op": "create"})

    r = await test_client.post("/pokemon", json=make_pokemon(1), auth=AUTH)
    await test_client.delete(f"/pokemon/{r.json()['id']}", auth=AUTH)
    await test_client.post("/pokemon", json={}, auth=AUTH)

    assert _value("pokemon_mutations_total", {"op": "create"}) == created_before + 1
    assert _value("pokemon_mutations_total", {"op": "delete"}) == deleted_before + 1
    assert (
        _value("pokemon_validation_failures_total", {"op": "create"})
        == rejected_before + 1
    )


@pytest.mark.asyncio
async def test_request_counter_uses_route_template(test_client):
    labels = {"path": "/pokemon/{id}", "method": "DELETE", "status": "400"}
    before = _value("http_requests_total", labels)

    await test_client.delete("/pokemon/12345", auth=AUTH)

    assert _value("http_requests_total", labels) == before + 1


@pytest.mark.asyncio
async def test_metrics_endpoint_exposes_text_format(test_client):
    await test_client.get("/pokemon")
    r = await test_client.get("/metrics")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/plain")
    assert "http_requests_total" in r.text
    assert "pokemon_mutations_total" in r.text
