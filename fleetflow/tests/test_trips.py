"""
Trip creation tests: capacity and driver checks, generated ids, embedded summaries.
"""

import pytest
from sqlalchemy import select

from fleetflow.app.models.audit_log import AuditLog
from fleetflow.app.services.audit import AuditAction


def _trip(vehicle_id, driver_id, **overrides):
    data = {
        "vehicle_id": vehicle_id,
        "driver_id": driver_id,
        "cargo_weight": 1000,
        "start_location": "Warehouse A",
        "end_location": "Store B",
    }
    data.update(overrides)
    return data


@pytest.mark.asyncio
async def test_create_trip_as_draft(client, draft_trip, van, driver):
    assert draft_trip["status"] == "draft"
    assert draft_trip["trip_id"].startswith("TR-")
    assert draft_trip["vehicle"]["license_plate"] == van["license_plate"]
    assert draft_trip["vehicle"]["max_load_capacity"] == 3500
    assert draft_trip["driver"]["email"] == driver["email"]
    assert draft_trip["start_time"] is None


@pytest.mark.asyncio
async def test_cargo_over_capacity_rejected(client, dispatcher_headers, van, driver):
    response = await client.post(
        "/v1/trips", json=_trip(van["id"], driver["id"], cargo_weight=4000), headers=dispatcher_headers
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Cargo weight (4000kg) exceeds vehicle capacity (3500kg)"


@pytest.mark.asyncio
async def test_cargo_at_capacity_allowed(client, dispatcher_headers, van, driver):
    response = await client.post(
        "/v1/trips", json=_trip(van["id"], driver["id"], cargo_weight=3500), headers=dispatcher_headers
    )
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_unknown_vehicle_or_driver(client, dispatcher_headers, van, driver):
    response = await client.post("/v1/trips", json=_trip(999, driver["id"]), headers=dispatcher_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Vehicle not found"
    
    response = await client.post("/v1/trips", json=_trip(van["id"], 999), headers=dispatcher_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Driver not found"


@pytest.mark.asyncio
async def test_suspended_driver_rejected(client, dispatcher_headers, safety_headers, van, driver):
    await client.patch(f"/v1/drivers/{driver['id']}", json={"status": "suspended"}, headers=safety_headers)
    
    response = await client.post("/v1/trips", json=_trip(van["id"], driver["id"]), headers=dispatcher_headers)
    assert response.status_code == 400
    assert "suspended" in response.json()["message"]


@pytest.mark.asyncio
async def test_expired_license_rejected(client, dispatcher_headers, safety_headers, van):
    expired = (await client.post("/v1/drivers", json={
        "name": "Sarah Wilson",
        "email": "sarah@example.com",
        "license_number": "DL-2023-004",
        "license_expiry": "2020-01-01",
    }, headers=safety_headers)).json()
    
    response = await client.post("/v1/trips", json=_trip(van["id"], expired["id"]), headers=dispatcher_headers)
    assert response.status_code == 400
    assert "expired license" in response.json()["message"]


@pytest.mark.asyncio
async def test_create_increments_trips_assigned(client, dispatcher_headers, safety_headers, draft_trip, driver):
    response = await client.get(f"/v1/drivers/{driver['id']}", headers=safety_headers)
    assert response.json()["trips_assigned"] == 1


@pytest.mark.asyncio
async def test_trip_ids_are_unique(client, dispatcher_headers, van, driver):
    ids = set()
    for _ in range(3):
        response = await client.post("/v1/trips", json=_trip(van["id"], driver["id"]), headers=dispatcher_headers)
        ids.add(response.json()["trip_id"])
    assert len(ids) == 3


@pytest.mark.asyncio
async def test_list_and_filter_trips(client, dispatcher_headers, manager_headers, draft_trip, van):
    response = await client.get("/v1/trips", headers=manager_headers)
    assert response.status_code == 200
    assert response.json()["total"] == 1
    
    response = await client.get("/v1/trips", params={"status": "completed"}, headers=dispatcher_headers)
    assert response.json()["total"] == 0
    
    response = await client.get("/v1/trips", params={"vehicle_id": van["id"]}, headers=dispatcher_headers)
    assert response.json()["trips"][0]["id"] == draft_trip["id"]


@pytest.mark.asyncio
async def test_edit_trip_details(client, dispatcher_headers, draft_trip):
    response = await client.put(
        f"/v1/trips/{draft_trip['id']}", json={"notes": "Fragile", "end_location": "Store C"},
        headers=dispatcher_headers
    )
    assert response.status_code == 200
    assert response.json()["notes"] == "Fragile"
    assert response.json()["end_location"] == "Store C"
    assert response.json()["status"] == "draft"


@pytest.mark.asyncio
async def test_deleted_vehicle_leaves_trip_orphaned(client, manager_headers, dispatcher_headers, draft_trip, van):
    await client.delete(f"/v1/vehicles/{van['id']}", headers=manager_headers)
    
    response = await client.get(f"/v1/trips/{draft_trip['id']}", headers=dispatcher_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["vehicle_id"] == van["id"]
    assert data["vehicle"] is None
    assert data["driver"] is not None


@pytest.mark.asyncio
async def test_delete_trip(client, dispatcher_headers, draft_trip):
    response = await client.delete(f"/v1/trips/{draft_trip['id']}", headers=dispatcher_headers)
    assert response.json() == {"message": "Trip deleted"}
    response = await client.get(f"/v1/trips/{draft_trip['id']}", headers=dispatcher_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_trip_update_and_delete_are_audited(client, db_session, dispatcher_headers, draft_trip):
    await client.patch(f"/v1/trips/{draft_trip['id']}", json={"notes": "Fragile"}, headers=dispatcher_headers)
    await client.delete(f"/v1/trips/{draft_trip['id']}", headers=dispatcher_headers)
    
    result = await db_session.execute(
        select(AuditLog).where(AuditLog.entity_id == draft_trip["trip_id"]).order_by(AuditLog.id)
    )
    actions = [entry.action for entry in result.scalars().all()]
    assert actions == [AuditAction.TRIP_CREATED, AuditAction.TRIP_UPDATED, AuditAction.TRIP_DELETED]
