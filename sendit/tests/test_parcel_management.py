"""
Integration tests for parcel management.

Tests parcel CRUD, validation errors and ownership enforcement.
"""

import json

import pytest


@pytest.mark.asyncio
async def test_create_parcel(client, user_auth, parcel_payload):
    response = await client.post("/v1/parcels", json=parcel_payload, headers=user_auth["headers"])
    assert response.status_code == 201
    data = response.json()
    assert data["user_id"] == user_auth["user_id"]
    assert data["weight_category"] == "light"
    assert data["dimensions"] == {"length": 30, "width": 20, "height": 10}
    assert data["volume"] == 6000


@pytest.mark.asyncio
async def test_oversized_parcel_is_rejected(client, user_auth, parcel_payload):
    parcel_payload["dimensions"] = {"length": 150, "width": 150, "height": 150}
    response = await client.post("/v1/parcels", json=parcel_payload, headers=user_auth["headers"])
    assert response.status_code == 400
    assert response.json()["details"]["field"] == "dimensions"


@pytest.mark.asyncio
async def test_large_parcel_under_limit_is_accepted(client, user_auth, parcel_payload):
    parcel_payload["dimensions"] = {"length": 150, "width": 150, "height": 149}
    response = await client.post("/v1/parcels", json=parcel_payload, headers=user_auth["headers"])
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_overweight_parcel_is_rejected(client, user_auth, parcel_payload):
    parcel_payload["weight"] = 120
    response = await client.post("/v1/parcels", json=parcel_payload, headers=user_auth["headers"])
    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_INVALID_INPUT"
    assert response.json()["details"]["field"] == "weight"


@pytest.mark.asyncio
async def test_nan_weight_is_rejected(client, user_auth, parcel_payload):
    # json.dumps writes the bare NaN literal, which the JSON body parser accepts
    body = json.dumps({**parcel_payload, "weight": float("nan")})
    response = await client.post(
        "/v1/parcels",
        content=body,
        headers={**user_auth["headers"], "Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["details"]["field"] == "weight"


@pytest.mark.asyncio
async def test_list_only_own_parcels(client, user_auth, other_user_auth, parcel, parcel_payload):
    await client.post("/v1/parcels", json=parcel_payload, headers=other_user_auth["headers"])

    response = await client.get("/v1/parcels", headers=user_auth["headers"])
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["parcels"][0]["id"] == parcel["id"]


@pytest.mark.asyncio
async def test_other_user_cannot_read_parcel(client, other_user_auth, parcel):
    response = await client.get(f"/v1/parcels/{parcel['id']}", headers=other_user_auth["headers"])
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_admin_can_read_any_parcel(client, admin_auth, parcel):
    response = await client.get(f"/v1/parcels/{parcel['id']}", headers=admin_auth["headers"])
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_missing_parcel(client, user_auth):
    response = await client.get("/v1/parcels/999", headers=user_auth["headers"])
    assert response.status_code == 404
    assert response.json()["error_code"] == "ERR_NOT_FOUND_001"


@pytest.mark.asyncio
async def test_partial_update_revalidates_merged_parcel(client, user_auth, parcel):
    response = await client.put(
        f"/v1/parcels/{parcel['id']}",
        json={"weight": 25},
        headers=user_auth["headers"]
    )
    assert response.status_code == 200
    data = response.json()
    assert data["weight"] == 25
    assert data["weight_category"] == "heavy"
    assert data["description"] == parcel["description"]

    rejected = await client.put(
        f"/v1/parcels/{parcel['id']}",
        json={"dimensions": {"length": 0, "width": 1, "height": 1}},
        headers=user_auth["headers"]
    )
    assert rejected.status_code == 400
    assert rejected.json()["details"]["field"] == "dimensions.length"


@pytest.mark.asyncio
async def test_other_user_cannot_update_parcel(client, other_user_auth, parcel):
    response = await client.put(
        f"/v1/parcels/{parcel['id']}",
        json={"description": "mine now"},
        headers=other_user_auth["headers"]
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_delete_parcel(client, user_auth, parcel):
    response = await client.delete(f"/v1/parcels/{parcel['id']}", headers=user_auth["headers"])
    assert response.status_code == 204

    gone = await client.get(f"/v1/parcels/{parcel['id']}", headers=user_auth["headers"])
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_delete_parcel_with_active_order_is_refused(client, user_auth, parcel, order):
    response = await client.delete(f"/v1/parcels/{parcel['id']}", headers=user_auth["headers"])
    assert response.status_code == 409
    assert response.json()["details"]["active_orders"] == 1


@pytest.mark.asyncio
async def test_delete_parcel_after_order_cancelled(client, user_auth, parcel, order):
    await client.put(f"/v1/orders/{order['id']}/cancel", headers=user_auth["headers"])

    response = await client.delete(f"/v1/parcels/{parcel['id']}", headers=user_auth["headers"])
    assert response.status_code == 204

    kept = await client.get(f"/v1/orders/{order['id']}", headers=user_auth["headers"])
    assert kept.status_code == 200
    assert kept.json()["parcel_id"] is None
