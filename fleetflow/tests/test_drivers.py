"""
Driver tests: CRUD, email normalization and read-time compliance fields.
"""

import pytest


@pytest.mark.asyncio
async def test_email_is_lowercased(client, driver):
    assert driver["email"] == "john@example.com"
    assert driver["status"] == "on_duty"
    assert driver["trips_assigned"] == 0


@pytest.mark.asyncio
async def test_driver_response_has_compliance_fields(client, driver):
    assert driver["license_status"] == "valid"
    assert driver["risk_level"] == "low"
    assert driver["is_assignable"] is True
    assert driver["completion_rate"] == "0"


@pytest.mark.asyncio
async def test_duplicate_email_rejected(client, safety_headers, driver):
    response = await client.post("/v1/drivers", json={
        "name": "Another John",
        "email": "JOHN@example.com",
        "license_number": "DL-9",
        "license_expiry": "2099-01-01",
    }, headers=safety_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_invalid_email_rejected(client, safety_headers):
    response = await client.post("/v1/drivers", json={
        "name": "Bad",
        "email": "not-an-email",
        "license_number": "DL-9",
        "license_expiry": "2099-01-01",
    }, headers=safety_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_safety_score_bounds(client, safety_headers):
    response = await client.post("/v1/drivers", json={
        "name": "Over",
        "email": "over@example.com",
        "license_number": "DL-9",
        "license_expiry": "2099-01-01",
        "safety_score": 120,
    }, headers=safety_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_suspend_driver(client, safety_headers, driver):
    response = await client.patch(
        f"/v1/drivers/{driver['id']}", json={"status": "suspended"}, headers=safety_headers
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "suspended"
    assert data["risk_level"] == "high"
    assert data["is_assignable"] is False


@pytest.mark.asyncio
async def test_expired_license_is_flagged(client, safety_headers):
    response = await client.post("/v1/drivers", json={
        "name": "Sarah Wilson",
        "email": "sarah@example.com",
        "license_number": "DL-2023-004",
        "license_expiry": "2020-03-10",
        "safety_score": 90,
    }, headers=safety_headers)
    data = response.json()
    assert data["license_status"] == "expired"
    assert data["days_until_license_expiry"] < 0
    assert data["risk_level"] == "high"


@pytest.mark.asyncio
async def test_list_filter_by_status(client, safety_headers, dispatcher_headers, driver):
    await client.post("/v1/drivers", json={
        "name": "Mike Johnson",
        "email": "mike@example.com",
        "license_number": "DL-2023-003",
        "license_expiry": "2099-06-20",
        "status": "off_duty",
    }, headers=safety_headers)
    
    response = await client.get("/v1/drivers", params={"status": "off_duty"}, headers=dispatcher_headers)
    data = response.json()
    assert data["total"] == 1
    assert data["drivers"][0]["name"] == "Mike Johnson"


@pytest.mark.asyncio
async def test_delete_driver(client, safety_headers, driver):
    response = await client.delete(f"/v1/drivers/{driver['id']}", headers=safety_headers)
    assert response.json() == {"message": "Driver deleted"}
    
    response = await client.get(f"/v1/drivers/{driver['id']}", headers=safety_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Driver not found"
