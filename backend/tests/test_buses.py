"""
Tests for the bus catalog: search, lookup, and the health/metrics endpoints.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_list_buses(client: AsyncClient, test_bus, pricey_bus, cheap_bus):
    """Catalog is public and ordered by bus name."""
    response = await client.get("/api/v1/buses/")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert data["cached"] is False
    assert [b["name"] for b in data["buses"]] == ["Airavat", "Himachal Volvo", "Shivneri"]
    assert data["buses"][0]["fromCity"] == "Bengaluru"
    assert data["buses"][0]["seatsAvailable"] == 40


@pytest.mark.asyncio
@pytest.mark.parametrize("query,expected", [
    ("from_city=bengaluru", ["Airavat"]),
    ("from_city=  DEL ", ["Himachal Volvo"]),
    ("to_city=pune", ["Shivneri"]),
    ("from_city=mumbai&to_city=manali", []),
    ("from_city=", ["Airavat", "Himachal Volvo", "Shivneri"]),
])
async def test_search_buses(client: AsyncClient, test_bus, pricey_bus, cheap_bus, query, expected):
    response = await client.get(f"/api/v1/buses/?{query}")
    assert response.status_code == 200
    assert [b["name"] for b in response.json()["buses"]] == expected


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(client: AsyncClient, test_bus):
    response = await client.get("/api/v1/buses/?from_city=%25")
    assert response.json()["total"] == 0


@pytest.mark.asyncio
async def test_get_bus(client: AsyncClient, test_bus):
    response = await client.get(f"/api/v1/buses/{test_bus.id}")
    assert response.status_code == 200
    data = response.json()
    assert data["busCode"] == "KA01-0300"
    assert data["fare"] == 300


@pytest.mark.asyncio
async def test_get_bus_not_found(client: AsyncClient, db_session):
    response = await client.get("/api/v1/buses/does-not-exist")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_metrics_exposes_settlement_counters(client: AsyncClient, auth_headers, pricey_bus):
    await client.post(
        "/api/v1/bookings/",
        json={"bus": {"id": pricey_bus.id, "fare": 1450}, "walletBalance": 500},
        headers=auth_headers,
    )
    response = await client.get("/metrics")
    assert response.status_code == 200
    assert 'settlement_outcomes_total{outcome="insufficient_funds"}' in response.text
