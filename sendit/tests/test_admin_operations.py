"""
Integration tests for admin order operations, statistics and user management.
"""

import pytest

from sendit.app.services.audit import AuditAction, get_audit_trail


@pytest.mark.asyncio
async def test_non_admin_cannot_access_admin_endpoints(client, user_auth):
    for path in ("/v1/admin/orders", "/v1/admin/stats", "/v1/admin/users"):
        response = await client.get(path, headers=user_auth["headers"])
        assert response.status_code == 403
        assert response.json()["error_code"] == "ERR_FORBIDDEN"


@pytest.mark.asyncio
async def test_status_update_with_location_notifies_owner(client, user_auth, admin_auth, order, locations):
    response = await client.put(
        f"/v1/admin/orders/{order['id']}/status",
        json={"status": "picked_up", "current_location": locations["chicago"]},
        headers=admin_auth["headers"]
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "picked_up"
    assert data["current_location"]["city"] == "Chicago"

    notifications = (await client.get("/v1/notifications", headers=user_auth["headers"])).json()
    latest = notifications["notifications"][0]
    assert latest["type"] == "STATUS_UPDATE"
    assert latest["metadata_payload"]["old_status"] == "pending"
    assert latest["metadata_payload"]["new_status"] == "picked_up"


@pytest.mark.asyncio
async def test_delivered_sets_actual_delivery_and_later_changes_keep_it(client, admin_auth, order):
    url = f"/v1/admin/orders/{order['id']}/status"
    delivered = await client.put(url, json={"status": "delivered"}, headers=admin_auth["headers"])
    actual_delivery = delivered.json()["actual_delivery"]
    assert actual_delivery is not None

    reopened = await client.put(url, json={"status": "in_transit"}, headers=admin_auth["headers"])
    assert reopened.status_code == 200
    assert reopened.json()["status"] == "in_transit"
    assert reopened.json()["actual_delivery"] == actual_delivery


@pytest.mark.asyncio
async def test_location_update_keeps_status(client, user_auth, admin_auth, order, locations):
    response = await client.put(
        f"/v1/admin/orders/{order['id']}/location",
        json={"current_location": locations["chicago"]},
        headers=admin_auth["headers"]
    )
    assert response.status_code == 200
    assert response.json()["status"] == "pending"
    assert response.json()["current_location"]["city"] == "Chicago"

    notifications = (await client.get("/v1/notifications", headers=user_auth["headers"])).json()
    assert notifications["notifications"][0]["type"] == "LOCATION_UPDATE"


@pytest.mark.asyncio
async def test_location_update_is_audited_like_status_changes(client, admin_auth, order, locations, db_session):
    response = await client.put(
        f"/v1/admin/orders/{order['id']}/location",
        json={"current_location": locations["chicago"]},
        headers=admin_auth["headers"]
    )
    assert response.status_code == 200

    trail = await get_audit_trail(db_session, resource_type="order", resource_id=order["id"])
    assert trail[0].action == AuditAction.ORDER_LOCATION_UPDATED
    assert trail[0].actor_id == admin_auth["user_id"]
    assert trail[0].meta_data["new_status"] == "pending"
    assert trail[0].meta_data["current_location"]["city"] == "Chicago"


@pytest.mark.asyncio
async def test_unknown_status_is_validation_error(client, admin_auth, order):
    response = await client.put(
        f"/v1/admin/orders/{order['id']}/status",
        json={"status": "lost"},
        headers=admin_auth["headers"]
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_status_update_missing_order(client, admin_auth):
    response = await client.put(
        "/v1/admin/orders/999/status",
        json={"status": "delivered"},
        headers=admin_auth["headers"]
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_orders_filtered_by_status(client, user_auth, admin_auth, order, parcel, locations):
    second = await client.post("/v1/orders", json={
        "parcel_id": parcel["id"],
        "pickup_location": locations["new_york"],
        "destination_location": locations["chicago"],
    }, headers=user_auth["headers"])
    await client.put(
        f"/v1/admin/orders/{second.json()['id']}/status",
        json={"status": "in_transit"},
        headers=admin_auth["headers"]
    )

    everything = await client.get("/v1/admin/orders", headers=admin_auth["headers"])
    assert everything.json()["total"] == 2

    in_transit = await client.get("/v1/admin/orders", params={"status": "in_transit"}, headers=admin_auth["headers"])
    data = in_transit.json()
    assert data["total"] == 1
    assert data["orders"][0]["id"] == second.json()["id"]


@pytest.mark.asyncio
async def test_stats(client, user_auth, admin_auth, order, parcel, locations):
    second = await client.post("/v1/orders", json={
        "parcel_id": parcel["id"],
        "pickup_location": locations["new_york"],
        "destination_location": locations["chicago"],
    }, headers=user_auth["headers"])
    await client.put(f"/v1/orders/{second.json()['id']}/cancel", headers=user_auth["headers"])

    response = await client.get("/v1/admin/stats", headers=admin_auth["headers"])
    assert response.status_code == 200
    stats = response.json()
    assert stats["total_orders"] == 2
    assert stats["pending_orders"] == 1
    assert stats["cancelled_orders"] == 1
    assert stats["delivered_orders"] == 0
    expected_revenue = order["price"] + second.json()["price"]
    assert stats["total_revenue"] == pytest.approx(expected_revenue)
    assert stats["average_order_value"] == pytest.approx(expected_revenue / 2)


@pytest.mark.asyncio
async def test_stats_refresh_after_status_change(client, admin_auth, order):
    before = (await client.get("/v1/admin/stats", headers=admin_auth["headers"])).json()
    assert before["delivered_orders"] == 0

    await client.put(
        f"/v1/admin/orders/{order['id']}/status",
        json={"status": "delivered"},
        headers=admin_auth["headers"]
    )

    after = (await client.get("/v1/admin/stats", headers=admin_auth["headers"])).json()
    assert after["delivered_orders"] == 1
    assert after["pending_orders"] == 0


@pytest.mark.asyncio
async def test_stats_refresh_after_destination_change(client, user_auth, admin_auth, order, locations):
    before = (await client.get("/v1/admin/stats", headers=admin_auth["headers"])).json()
    assert before["total_revenue"] == pytest.approx(order["price"])

    response = await client.put(
        f"/v1/orders/{order['id']}/destination",
        json={"destination_location": locations["chicago"]},
        headers=user_auth["headers"]
    )
    assert response.status_code == 200
    new_price = response.json()["price"]
    assert new_price != pytest.approx(order["price"])

    after = (await client.get("/v1/admin/stats", headers=admin_auth["headers"])).json()
    assert after["total_revenue"] == pytest.approx(new_price)
    assert after["average_order_value"] == pytest.approx(new_price)


@pytest.mark.asyncio
async def test_list_users(client, admin_auth, user_auth):
    response = await client.get("/v1/admin/users", headers=admin_auth["headers"])
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert {u["email"] for u in data["users"]} == {"admin@example.com", "jane@example.com"}


@pytest.mark.asyncio
async def test_create_admin(client, admin_auth):
    response = await client.post("/v1/admin/create-admin", json={
        "email": "second-admin@example.com",
        "password": "password123",
        "first_name": "Second",
        "last_name": "Admin",
    }, headers=admin_auth["headers"])
    assert response.status_code == 201
    assert response.json()["role"] == "admin"

    login = await client.post("/v1/auth/login", json={
        "email": "second-admin@example.com",
        "password": "password123"
    })
    assert login.status_code == 200
    assert login.json()["user"]["role"] == "admin"


@pytest.mark.asyncio
async def test_user_cannot_create_admin(client, user_auth):
    response = await client.post("/v1/admin/create-admin", json={
        "email": "sneaky@example.com",
        "password": "password123",
        "first_name": "S",
        "last_name": "N",
    }, headers=user_auth["headers"])
    assert response.status_code == 403
