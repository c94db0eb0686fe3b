"""Tests for cake order and production stage endpoints."""

import pytest
from httpx import AsyncClient

from conftest import auth_headers, create_user


def _order(user_id: int, **overrides) -> dict:
    data = {
        "user_id": user_id,
        "size": "Medium",
        "flavor": "Vanilla",
        "message": "Happy Birthday!",
        "delivery_date": "2025-12-25",
        "notes": "No nuts, please.",
        "extended_description": "Extra layers of chocolate",
        "sample_images": ["image1.jpg", "image2.jpg"],
        "color_preferences": ["Red", "Blue"],
    }
    data.update(overrides)
    return data


@pytest.mark.asyncio
async def test_customer_creates_own_order(async_client: AsyncClient, customer, customer_headers):
    resp = await async_client.post("/api/v1/orders", json=_order(customer.id), headers=customer_headers)
    assert resp.status_code == 201
    data = resp.json()
    assert data["status"] == "Pending"
    assert data["sample_images"] == ["image1.jpg", "image2.jpg"]
    assert data["delivery_date"] == "2025-12-25"


@pytest.mark.asyncio
async def test_customer_cannot_order_for_someone_else(
    async_client: AsyncClient, admin, customer_headers
):
    resp = await async_client.post("/api/v1/orders", json=_order(admin.id), headers=customer_headers)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_order_requires_existing_user_and_design(async_client: AsyncClient, admin_headers, customer):
    resp = await async_client.post("/api/v1/orders", json=_order(9999), headers=admin_headers)
    assert resp.status_code == 404

    resp = await async_client.post(
        "/api/v1/orders", json=_order(customer.id, design_id=9999), headers=admin_headers
    )
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Design not found"


@pytest.mark.asyncio
async def test_order_requires_auth(async_client: AsyncClient, customer):
    resp = await async_client.post("/api/v1/orders", json=_order(customer.id))
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_order_visibility(
    async_client: AsyncClient, db_session, token_issuer, customer, customer_headers, admin_headers
):
    create = await async_client.post("/api/v1/orders", json=_order(customer.id), headers=customer_headers)
    order_id = create.json()["id"]

    assert (await async_client.get(f"/api/v1/orders/{order_id}", headers=customer_headers)).status_code == 200
    assert (await async_client.get(f"/api/v1/orders/{order_id}", headers=admin_headers)).status_code == 200

    dave = await create_user(db_session, email="dave@example.com", name="Dave")
    dave_headers = auth_headers(token_issuer, dave)
    assert (await async_client.get(f"/api/v1/orders/{order_id}", headers=dave_headers)).status_code == 403

    resp = await async_client.get(f"/api/v1/orders/user/{customer.id}", headers=customer_headers)
    assert [o["id"] for o in resp.json()] == [order_id]
    resp = await async_client.get(f"/api/v1/orders/user/{dave.id}", headers=dave_headers)
    assert resp.json() == []

    assert (await async_client.get("/api/v1/orders", headers=customer_headers)).status_code == 403
    resp = await async_client.get("/api/v1/orders", headers=admin_headers)
    assert len(resp.json()) == 1


@pytest.mark.asyncio
async def test_get_order_not_found(async_client: AsyncClient, admin_headers):
    resp = await async_client.get("/api/v1/orders/9999", headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Order not found"


@pytest.mark.asyncio
async def test_update_order_status(async_client: AsyncClient, customer, admin_headers, customer_headers):
    create = await async_client.post("/api/v1/orders", json=_order(customer.id), headers=customer_headers)
    order_id = create.json()["id"]

    resp = await async_client.patch(f"/api/v1/orders/{order_id}", json={}, headers=admin_headers)
    assert resp.status_code == 400

    resp = await async_client.patch(
        f"/api/v1/orders/{order_id}", json={"status": "Confirmed"}, headers=customer_headers
    )
    assert resp.status_code == 403

    resp = await async_client.patch(
        f"/api/v1/orders/{order_id}", json={"status": "Confirmed"}, headers=admin_headers
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "Confirmed"

    resp = await async_client.patch(
        f"/api/v1/orders/{order_id}", json={"status": "Teleported"}, headers=admin_headers
    )
    assert resp.status_code == 422

    resp = await async_client.patch("/api/v1/orders/9999", json={"status": "Ready"}, headers=admin_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_update_order_details(async_client: AsyncClient, customer, customer_headers):
    create = await async_client.post("/api/v1/orders", json=_order(customer.id), headers=customer_headers)
    order_id = create.json()["id"]

    resp = await async_client.patch(
        f"/api/v1/orders/{order_id}/details",
        json={"flavor": "Red Velvet", "color_preferences": ["Gold"]},
        headers=customer_headers,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["flavor"] == "Red Velvet"
    assert data["color_preferences"] == ["Gold"]
    assert data["size"] == "Medium"


@pytest.mark.asyncio
async def test_delete_order_removes_stages(async_client: AsyncClient, customer, customer_headers, admin_headers):
    create = await async_client.post("/api/v1/orders", json=_order(customer.id), headers=customer_headers)
    order_id = create.json()["id"]
    stage = await async_client.post(
        "/api/v1/stages", json={"order_id": order_id, "stage_name": "Baking"}, headers=admin_headers
    )
    stage_id = stage.json()["id"]

    assert (await async_client.delete(f"/api/v1/orders/{order_id}", headers=customer_headers)).status_code == 403

    resp = await async_client.delete(f"/api/v1/orders/{order_id}", headers=admin_headers)
    assert resp.status_code == 200
    assert (await async_client.get(f"/api/v1/stages/{stage_id}", headers=admin_headers)).status_code == 404
    assert (await async_client.delete(f"/api/v1/orders/{order_id}", headers=admin_headers)).status_code == 404


# ── Stages ──────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_stage_lifecycle(async_client: AsyncClient, customer, customer_headers, admin_headers):
    create = await async_client.post("/api/v1/orders", json=_order(customer.id), headers=customer_headers)
    order_id = create.json()["id"]

    resp = await async_client.post(
        "/api/v1/stages", json={"order_id": order_id, "stage_name": "Baking"}, headers=customer_headers
    )
    assert resp.status_code == 403

    resp = await async_client.post(
        "/api/v1/stages", json={"order_id": order_id, "stage_name": "Baking"}, headers=admin_headers
    )
    assert resp.status_code == 201
    stage_id = resp.json()["id"]
    assert resp.json()["status"] == "Pending"

    resp = await async_client.put(
        f"/api/v1/stages/{stage_id}", json={"status": "Completed"}, headers=admin_headers
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "Completed"
    assert resp.json()["stage_name"] == "Baking"

    resp = await async_client.get(f"/api/v1/stages/order/{order_id}", headers=customer_headers)
    assert resp.status_code == 200
    assert [s["id"] for s in resp.json()] == [stage_id]

    resp = await async_client.delete(f"/api/v1/stages/{stage_id}", headers=admin_headers)
    assert resp.status_code == 200
    resp = await async_client.get(f"/api/v1/stages/{stage_id}", headers=admin_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_stage_for_missing_order(async_client: AsyncClient, admin_headers):
    resp = await async_client.post(
        "/api/v1/stages", json={"order_id": 9999, "stage_name": "Baking"}, headers=admin_headers
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_update_order_details_ignores_nulls(async_client: AsyncClient, customer, customer_headers):
    create = await async_client.post("/api/v1/orders", json=_order(customer.id), headers=customer_headers)
    order_id = create.json()["id"]

    resp = await async_client.patch(
        f"/api/v1/orders/{order_id}/details",
        json={"size": None, "flavor": None, "sample_images": None, "notes": "No nuts"},
        headers=customer_headers,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["size"] == "Medium"
    assert data["flavor"] == create.json()["flavor"]
    assert data["sample_images"] == create.json()["sample_images"]
    assert data["notes"] == "No nuts"


@pytest.mark.asyncio
async def test_update_stage_ignores_nulls_and_rejects_blank_name(
    async_client: AsyncClient, customer, customer_headers, admin_headers
):
    create = await async_client.post("/api/v1/orders", json=_order(customer.id), headers=customer_headers)
    resp = await async_client.post(
        "/api/v1/stages",
        json={"order_id": create.json()["id"], "stage_name": "Baking"},
        headers=admin_headers,
    )
    stage_id = resp.json()["id"]

    resp = await async_client.put(
        f"/api/v1/stages/{stage_id}", json={"stage_name": None, "status": None}, headers=admin_headers
    )
    assert resp.status_code == 200
    assert resp.json()["stage_name"] == "Baking"
    assert resp.json()["status"] == "Pending"

    resp = await async_client.put(f"/api/v1/stages/{stage_id}", json={"stage_name": ""}, headers=admin_headers)
    assert resp.status_code == 422
