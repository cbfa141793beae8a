"""
Trip lifecycle tests: allowed edges and their vehicle/driver side effects.
"""

import pytest


async def _set_status(client, headers, trip_id, status, **extra):
    return await client.patch(f"/v1/trips/{trip_id}/status", json={"status": status, **extra}, headers=headers)


@pytest.mark.asyncio
async def test_dispatch_puts_vehicle_on_trip(client, dispatcher_headers, manager_headers, draft_trip, van):
    response = await _set_status(client, dispatcher_headers, draft_trip["id"], "dispatched")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "dispatched"
    assert data["start_time"] is not None
    assert data["start_odometer"] == van["current_odometer"]
    assert data["vehicle"]["status"] == "on_trip"


@pytest.mark.asyncio
async def test_complete_updates_vehicle_and_driver(
    client, dispatcher_headers, manager_headers, safety_headers, draft_trip, van, driver
):
    await _set_status(client, dispatcher_headers, draft_trip["id"], "dispatched", start_odometer=34560)
    response = await client.put(
        f"/v1/trips/{draft_trip['id']}/status",
        json={"status": "completed", "end_odometer": 34880},
        headers=dispatcher_headers
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "completed"
    assert data["end_time"] is not None
    assert data["total_distance"] == 320
    
    vehicle = (await client.get(f"/v1/vehicles/{van['id']}", headers=manager_headers)).json()
    assert vehicle["status"] == "available"
    assert vehicle["current_odometer"] == 34880
    
    updated_driver = (await client.get(f"/v1/drivers/{driver['id']}", headers=safety_headers)).json()
    assert updated_driver["trips_completed"] == driver["trips_completed"] + 1


@pytest.mark.asyncio
async def test_completed_is_terminal(client, dispatcher_headers, draft_trip):
    await _set_status(client, dispatcher_headers, draft_trip["id"], "dispatched")
    await _set_status(client, dispatcher_headers, draft_trip["id"], "completed")
    
    response = await _set_status(client, dispatcher_headers, draft_trip["id"], "dispatched")
    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "ERR_TRIP_TRANSITION"
    assert body["message"] == "Invalid status transition from completed to dispatched"


@pytest.mark.asyncio
async def test_draft_cannot_skip_to_completed(client, dispatcher_headers, draft_trip):
    response = await _set_status(client, dispatcher_headers, draft_trip["id"], "completed")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_same_status_is_rejected(client, dispatcher_headers, draft_trip):
    response = await _set_status(client, dispatcher_headers, draft_trip["id"], "draft")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_cancel_dispatched_releases_vehicle(client, dispatcher_headers, manager_headers, draft_trip, van):
    await _set_status(client, dispatcher_headers, draft_trip["id"], "dispatched")
    response = await _set_status(client, dispatcher_headers, draft_trip["id"], "cancelled")
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    
    vehicle = (await client.get(f"/v1/vehicles/{van['id']}", headers=manager_headers)).json()
    assert vehicle["status"] == "available"


@pytest.mark.asyncio
async def test_cancel_draft_leaves_vehicle_alone(client, dispatcher_headers, manager_headers, draft_trip, van):
    await client.patch(f"/v1/vehicles/{van['id']}/toggle-service", headers=manager_headers)
    
    response = await _set_status(client, dispatcher_headers, draft_trip["id"], "cancelled")
    assert response.status_code == 200
    
    vehicle = (await client.get(f"/v1/vehicles/{van['id']}", headers=manager_headers)).json()
    assert vehicle["status"] == "out_of_service"


@pytest.mark.asyncio
async def test_cancelled_is_terminal(client, dispatcher_headers, draft_trip):
    await _set_status(client, dispatcher_headers, draft_trip["id"], "cancelled")
    response = await _set_status(client, dispatcher_headers, draft_trip["id"], "dispatched")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_transition_with_deleted_vehicle(client, dispatcher_headers, manager_headers, draft_trip, van):
    await client.delete(f"/v1/vehicles/{van['id']}", headers=manager_headers)
    
    response = await _set_status(client, dispatcher_headers, draft_trip["id"], "dispatched")
    assert response.status_code == 200
    assert response.json()["vehicle"] is None


@pytest.mark.asyncio
async def test_unknown_status_value(client, dispatcher_headers, draft_trip):
    response = await _set_status(client, dispatcher_headers, draft_trip["id"], "teleported")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_missing_trip(client, dispatcher_headers, demo_users):
    response = await _set_status(client, dispatcher_headers, 999, "dispatched")
    assert response.status_code == 404
    assert response.json()["message"] == "Trip not found"
