"""
Demo data seeding tests.
"""

import pytest


@pytest.mark.asyncio
async def test_seed_loads_demo_fleet(client, manager_headers):
    response = await client.post("/v1/seed", headers=manager_headers)
    assert response.status_code == 200
    assert response.json()["counts"] == {
        "vehicles": 5,
        "drivers": 6,
        "trips": 4,
        "fuel_expenses": 6,
        "maintenance": 6,
    }
    
    vehicles = (await client.get("/v1/vehicles", params={"page_size": 100}, headers=manager_headers)).json()
    by_name = {v["name"]: v for v in vehicles["vehicles"]}
    assert by_name["TR-001"]["total_fuel_cost"] == 28000
    assert by_name["TR-001"]["total_maintenance_cost"] == 400
    assert by_name["TR-005"]["status"] == "on_trip"


@pytest.mark.asyncio
async def test_seed_ledger_is_balanced(client, manager_headers):
    await client.post("/v1/seed", headers=manager_headers)
    vehicles = (await client.get("/v1/vehicles", headers=manager_headers)).json()["vehicles"]
    
    for vehicle in vehicles:
        response = await client.post(f"/v1/vehicles/{vehicle['id']}/reconcile-costs", headers=manager_headers)
        reconciled = response.json()
        assert reconciled["total_fuel_cost"] == vehicle["total_fuel_cost"]
        assert reconciled["total_maintenance_cost"] == vehicle["total_maintenance_cost"]


@pytest.mark.asyncio
async def test_seed_is_repeatable(client, manager_headers):
    await client.post("/v1/seed", headers=manager_headers)
    await client.post("/v1/seed", headers=manager_headers)
    
    data = (await client.get("/v1/analytics/dashboard", headers=manager_headers)).json()
    assert data["total_vehicles"] == 5
    assert data["total_drivers"] == 6
    assert data["total_trips"] == 4
    assert data["pending_cargo"] == 1
    assert data["active_trips"] == 2
    assert data["completed_trips"] == 1


@pytest.mark.asyncio
async def test_seed_without_reset_on_empty_fleet(client, manager_headers):
    response = await client.post("/v1/seed", params={"reset": "false"}, headers=manager_headers)
    assert response.status_code == 200
    assert response.json()["counts"]["vehicles"] == 5


@pytest.mark.asyncio
async def test_seed_without_reset_refuses_existing_demo_data(client, manager_headers):
    await client.post("/v1/seed", headers=manager_headers)
    
    response = await client.post("/v1/seed", params={"reset": "false"}, headers=manager_headers)
    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "ERR_DUPLICATE"
    assert "MH02AB0001" in body["details"]["license_plates"]
    
    # Nothing was added by the refused call
    data = (await client.get("/v1/analytics/dashboard", headers=manager_headers)).json()
    assert data["total_vehicles"] == 5
    assert data["total_trips"] == 4
