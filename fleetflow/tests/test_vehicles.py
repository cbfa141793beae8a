"""
Vehicle registry tests: CRUD, filters, uniqueness and service toggling.
"""

import pytest
from sqlalchemy import select

from fleetflow.app.models.audit_log import AuditLog
from fleetflow.app.services.audit import AuditAction


def _truck(**overrides):
    data = {
        "name": "TR-001",
        "license_plate": "MH02AB0001",
        "model": "Volvo FH16",
        "vehicle_type": "truck",
        "max_load_capacity": 25000,
        "region": "West",
        "acquisition_cost": 800000,
    }
    data.update(overrides)
    return data


@pytest.mark.asyncio
async def test_create_vehicle_defaults(client, manager_headers):
    response = await client.post("/v1/vehicles", json=_truck(), headers=manager_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "available"
    assert data["current_odometer"] == 0
    assert data["total_fuel_cost"] == 0
    assert data["total_maintenance_cost"] == 0


@pytest.mark.asyncio
async def test_create_vehicle_missing_field(client, manager_headers):
    payload = _truck()
    del payload["model"]
    response = await client.post("/v1/vehicles", json=payload, headers=manager_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "model is required"


@pytest.mark.asyncio
async def test_capacity_must_be_positive(client, manager_headers):
    response = await client.post("/v1/vehicles", json=_truck(max_load_capacity=0), headers=manager_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_duplicate_license_plate(client, manager_headers):
    await client.post("/v1/vehicles", json=_truck(), headers=manager_headers)
    response = await client.post("/v1/vehicles", json=_truck(name="TR-002"), headers=manager_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "License plate already registered"
    assert response.json()["error_code"] == "ERR_DUPLICATE"


@pytest.mark.asyncio
async def test_vehicle_creation_is_audited(client, db_session, manager_headers):
    created = (await client.post("/v1/vehicles", json=_truck(), headers=manager_headers)).json()
    
    result = await db_session.execute(select(AuditLog).where(AuditLog.action == AuditAction.VEHICLE_CREATED))
    entry = result.scalar_one()
    assert entry.entity_type == "vehicle"
    assert entry.entity_id == str(created["id"])
    assert entry.actor_email == "manager@fleetflow.com"


@pytest.mark.asyncio
async def test_list_filters_and_pagination(client, manager_headers):
    await client.post("/v1/vehicles", json=_truck(), headers=manager_headers)
    await client.post("/v1/vehicles", json=_truck(
        name="VN-003", license_plate="MH02AB0003", vehicle_type="van", max_load_capacity=3500, region="East"
    ), headers=manager_headers)
    
    response = await client.get("/v1/vehicles", headers=manager_headers)
    data = response.json()
    assert data["total"] == 2
    # Newest first
    assert [v["name"] for v in data["vehicles"]] == ["VN-003", "TR-001"]
    
    response = await client.get("/v1/vehicles", params={"vehicle_type": "van"}, headers=manager_headers)
    assert [v["name"] for v in response.json()["vehicles"]] == ["VN-003"]
    
    response = await client.get("/v1/vehicles", params={"region": "West"}, headers=manager_headers)
    assert [v["name"] for v in response.json()["vehicles"]] == ["TR-001"]
    
    response = await client.get("/v1/vehicles", params={"page": 2, "page_size": 1}, headers=manager_headers)
    data = response.json()
    assert data["total"] == 2
    assert [v["name"] for v in data["vehicles"]] == ["TR-001"]


@pytest.mark.asyncio
async def test_get_missing_vehicle(client, manager_headers):
    response = await client.get("/v1/vehicles/999", headers=manager_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Vehicle not found"


@pytest.mark.asyncio
async def test_update_vehicle_partial(client, manager_headers, van):
    response = await client.put(
        f"/v1/vehicles/{van['id']}", json={"region": "North"}, headers=manager_headers
    )
    assert response.status_code == 200
    data = response.json()
    assert data["region"] == "North"
    assert data["name"] == van["name"]


@pytest.mark.asyncio
async def test_update_cannot_take_existing_plate(client, manager_headers, van):
    other = (await client.post("/v1/vehicles", json=_truck(), headers=manager_headers)).json()
    response = await client.patch(
        f"/v1/vehicles/{other['id']}", json={"license_plate": van["license_plate"]}, headers=manager_headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_toggle_service(client, manager_headers, van):
    response = await client.patch(f"/v1/vehicles/{van['id']}/toggle-service", headers=manager_headers)
    assert response.json()["status"] == "out_of_service"
    
    response = await client.patch(f"/v1/vehicles/{van['id']}/toggle-service", headers=manager_headers)
    assert response.json()["status"] == "available"


@pytest.mark.asyncio
async def test_delete_vehicle(client, manager_headers, van):
    response = await client.delete(f"/v1/vehicles/{van['id']}", headers=manager_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Vehicle deleted"}
    
    response = await client.get(f"/v1/vehicles/{van['id']}", headers=manager_headers)
    assert response.status_code == 404
