"""
Integration tests for the authentication flow.

Verifies Login -> Me -> Logout and the audit trail of each attempt.
"""

import pytest
from sqlalchemy import select

from fleetflow.app.models.audit_log import AuditLog
from fleetflow.app.models.user import User
from fleetflow.app.services.audit import AuditAction


@pytest.mark.asyncio
async def test_login_returns_token_and_allowed_pages(client, demo_users):
    response = await client.post("/v1/auth/login", json={
        "email": "dispatcher@fleetflow.com",
        "password": "dispatcher123"
    })
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["role"] == "DISPATCHER"
    assert data["role_label"] == "Dispatcher"
    assert "/dashboard/trips" in data["allowed_pages"]
    assert "/dashboard/fuel" not in data["allowed_pages"]


@pytest.mark.asyncio
async def test_login_email_is_case_insensitive(client, demo_users):
    response = await client.post("/v1/auth/login", json={
        "email": "Manager@FleetFlow.com",
        "password": "manager123"
    })
    assert response.status_code == 200
    assert response.json()["email"] == "manager@fleetflow.com"


@pytest.mark.asyncio
async def test_login_wrong_password(client, demo_users):
    response = await client.post("/v1/auth/login", json={
        "email": "manager@fleetflow.com",
        "password": "wrong"
    })
    assert response.status_code == 401
    assert response.json()["error_code"] == "ERR_UNAUTHORIZED"
    assert response.json()["message"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_login_missing_field_is_400(client, demo_users):
    response = await client.post("/v1/auth/login", json={"email": "manager@fleetflow.com"})
    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "ERR_VALIDATION"
    assert "password" in body["message"]


@pytest.mark.asyncio
async def test_inactive_user_cannot_login(client, db_session, demo_users):
    user = (await db_session.execute(
        select(User).where(User.email == "safety@fleetflow.com")
    )).scalar_one()
    user.is_active = False
    await db_session.commit()
    
    response = await client.post("/v1/auth/login", json={
        "email": "safety@fleetflow.com",
        "password": "safety123"
    })
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_me_returns_current_user(client, finance_headers):
    response = await client.get("/v1/auth/me", headers=finance_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "finance@fleetflow.com"
    assert data["role"] == "FINANCIAL_ANALYST"
    assert "/dashboard/reports" in data["allowed_pages"]


@pytest.mark.asyncio
async def test_me_requires_token(client):
    response = await client.get("/v1/auth/me")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_invalid_token_rejected(client):
    response = await client.get("/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["message"] == "Could not validate credentials"


@pytest.mark.asyncio
async def test_logout_revokes_token(client, manager_headers):
    response = await client.post("/v1/auth/logout", headers=manager_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Logged out"
    
    response = await client.get("/v1/auth/me", headers=manager_headers)
    assert response.status_code == 401
    assert response.json()["message"] == "Token has been revoked"


@pytest.mark.asyncio
async def test_login_attempts_are_audited(client, db_session, demo_users):
    await client.post("/v1/auth/login", json={"email": "nobody@fleetflow.com", "password": "x"})
    await client.post("/v1/auth/login", json={"email": "manager@fleetflow.com", "password": "manager123"})
    
    logs = (await db_session.execute(select(AuditLog).order_by(AuditLog.id))).scalars().all()
    actions = [log.action for log in logs]
    assert actions == [AuditAction.LOGIN_FAILED, AuditAction.LOGIN_SUCCESS]
    assert logs[0].meta_data == {"reason": "User not found"}
    assert logs[1].actor_email == "manager@fleetflow.com"


@pytest.mark.asyncio
async def test_revocation_expires_with_token(client, manager_headers, token_store):
    await client.post("/v1/auth/logout", headers=manager_headers)
    
    (ttl,) = token_store.ttls.values()
    assert 0 < ttl <= 24 * 60 * 60


@pytest.mark.asyncio
async def test_logout_unavailable_without_token_store(client, manager_headers, token_store):
    token_store.down = True
    
    response = await client.post("/v1/auth/logout", headers=manager_headers)
    assert response.status_code == 503
    assert response.json()["error_code"] == "ERR_SERVICE_UNAVAILABLE"
    
    # Revocation checks fail open, so the session keeps working
    response = await client.get("/v1/auth/me", headers=manager_headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_health_reports_token_store(client, token_store):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["token_store"] == "up"
    
    token_store.down = True
    assert (await client.get("/health")).json()["token_store"] == "down"
