"""Tests for cake design catalogue endpoints."""

import pytest
from httpx import AsyncClient

CHOC = {
    "design_name": "Chocolate Delight",
    "description": "Rich chocolate base with frosting",
    "base_flavor": "Chocolate",
    "size": "Medium",
    "image_url": "chocolate.jpg",
    "category": "Birthday",
}


@pytest.mark.asyncio
async def test_create_design_admin_only(async_client: AsyncClient, admin_headers, customer_headers):
    resp = await async_client.post("/api/v1/designs", json=CHOC, headers=customer_headers)
    assert resp.status_code == 403

    resp = await async_client.post("/api/v1/designs", json=CHOC, headers=admin_headers)
    assert resp.status_code == 201
    data = resp.json()
    assert data["design_name"] == "Chocolate Delight"
    assert data["availability"] is True


@pytest.mark.asyncio
async def test_list_and_get_designs_are_public(async_client: AsyncClient, admin_headers):
    await async_client.post("/api/v1/designs", json=CHOC, headers=admin_headers)
    await async_client.post(
        "/api/v1/designs",
        json={**CHOC, "design_name": "Vanilla Dream", "category": "Wedding", "availability": False},
        headers=admin_headers,
    )

    resp = await async_client.get("/api/v1/designs")
    assert resp.status_code == 200
    assert len(resp.json()) == 2

    resp = await async_client.get("/api/v1/designs?category=Wedding")
    assert [d["design_name"] for d in resp.json()] == ["Vanilla Dream"]

    resp = await async_client.get("/api/v1/designs?available_only=true")
    assert [d["design_name"] for d in resp.json()] == ["Chocolate Delight"]

    design_id = resp.json()[0]["id"]
    resp = await async_client.get(f"/api/v1/designs/{design_id}")
    assert resp.status_code == 200
    assert resp.json()["base_flavor"] == "Chocolate"


@pytest.mark.asyncio
async def test_get_design_not_found(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/designs/9999")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Design not found"


@pytest.mark.asyncio
async def test_update_and_delete_design(async_client: AsyncClient, admin_headers):
    create = await async_client.post("/api/v1/designs", json=CHOC, headers=admin_headers)
    design_id = create.json()["id"]

    resp = await async_client.put(
        f"/api/v1/designs/{design_id}", json={"size": "Large"}, headers=admin_headers
    )
    assert resp.status_code == 200
    assert resp.json()["size"] == "Large"
    assert resp.json()["design_name"] == "Chocolate Delight"

    resp = await async_client.delete(f"/api/v1/designs/{design_id}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    resp = await async_client.delete(f"/api/v1/designs/{design_id}", headers=admin_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_update_design_ignores_null_and_rejects_blank_name(async_client: AsyncClient, admin_headers):
    create = await async_client.post("/api/v1/designs", json=CHOC, headers=admin_headers)
    design_id = create.json()["id"]

    resp = await async_client.put(
        f"/api/v1/designs/{design_id}",
        json={"design_name": None, "availability": False},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["design_name"] == "Chocolate Delight"
    assert resp.json()["availability"] is False

    resp = await async_client.put(
        f"/api/v1/designs/{design_id}", json={"design_name": "   "}, headers=admin_headers
    )
    assert resp.status_code == 422
