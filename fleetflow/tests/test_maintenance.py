"""
Maintenance tests: vehicle shop status and maintenance cost ledger.
"""

import pytest


async def _vehicle(client, headers, vehicle_id):
    return (await client.get(f"/v1/vehicles/{vehicle_id}", headers=headers)).json()


def _service(vehicle_id, **overrides):
    data = {
        "vehicle_id": vehicle_id,
        "service_type": "Oil Change",
        "cost": 250,
        "service_date": "2024-01-20",
    }
    data.update(overrides)
    return data


@pytest.mark.asyncio
async def test_schedule_puts_vehicle_in_shop(client, manager_headers, van):
    response = await client.post("/v1/maintenance", json=_service(van["id"]), headers=manager_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "scheduled"
    assert data["vehicle"]["status"] == "in_shop"
    
    vehicle = await _vehicle(client, manager_headers, van["id"])
    assert vehicle["status"] == "in_shop"
    assert vehicle["total_maintenance_cost"] == 250


@pytest.mark.asyncio
async def test_schedule_keeps_non_available_status(client, manager_headers, van):
    await client.patch(f"/v1/vehicles/{van['id']}/toggle-service", headers=manager_headers)
    await client.post("/v1/maintenance", json=_service(van["id"]), headers=manager_headers)
    
    vehicle = await _vehicle(client, manager_headers, van["id"])
    assert vehicle["status"] == "out_of_service"


@pytest.mark.asyncio
async def test_complete_releases_vehicle(client, manager_headers, van):
    record = (await client.post("/v1/maintenance", json=_service(van["id"]), headers=manager_headers)).json()
    
    response = await client.put(
        f"/v1/maintenance/{record['id']}", json={"status": "completed"}, headers=manager_headers
    )
    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    
    vehicle = await _vehicle(client, manager_headers, van["id"])
    assert vehicle["status"] == "available"


@pytest.mark.asyncio
async def test_cost_update_and_delete_adjust_ledger(client, manager_headers, van):
    record = (await client.post("/v1/maintenance", json=_service(van["id"]), headers=manager_headers)).json()
    await client.post("/v1/maintenance", json=_service(van["id"], cost=150), headers=manager_headers)
    
    await client.patch(f"/v1/maintenance/{record['id']}", json={"cost": 400}, headers=manager_headers)
    assert (await _vehicle(client, manager_headers, van["id"]))["total_maintenance_cost"] == 550
    
    response = await client.delete(f"/v1/maintenance/{record['id']}", headers=manager_headers)
    assert response.json() == {"message": "Maintenance record deleted"}
    assert (await _vehicle(client, manager_headers, van["id"]))["total_maintenance_cost"] == 150


@pytest.mark.asyncio
async def test_filter_by_status(client, manager_headers, finance_headers, van):
    record = (await client.post("/v1/maintenance", json=_service(van["id"]), headers=manager_headers)).json()
    await client.post("/v1/maintenance", json=_service(van["id"], service_type="Brake Service"), headers=manager_headers)
    await client.put(f"/v1/maintenance/{record['id']}", json={"status": "completed"}, headers=manager_headers)
    
    response = await client.get("/v1/maintenance", params={"status": "scheduled"}, headers=finance_headers)
    data = response.json()
    assert data["total"] == 1
    assert data["records"][0]["service_type"] == "Brake Service"


@pytest.mark.asyncio
async def test_unknown_vehicle(client, manager_headers):
    response = await client.post("/v1/maintenance", json=_service(999), headers=manager_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_missing_record(client, finance_headers):
    response = await client.get("/v1/maintenance/999", headers=finance_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Maintenance record not found"


@pytest.mark.asyncio
async def test_deleting_vehicle_keeps_records(client, manager_headers, van):
    await client.post("/v1/maintenance", json=_service(van["id"]), headers=manager_headers)
    await client.post("/v1/fuel", json={
        "vehicle_id": van["id"], "liters": 10, "cost": 1000, "fuel_date": "2024-01-20"
    }, headers=manager_headers)
    
    await client.delete(f"/v1/vehicles/{van['id']}", headers=manager_headers)
    
    records = (await client.get("/v1/maintenance", headers=manager_headers)).json()
    assert records["total"] == 1
    assert records["records"][0]["vehicle"] is None
    
    expenses = (await client.get("/v1/fuel", headers=manager_headers)).json()
    assert expenses["total"] == 1
