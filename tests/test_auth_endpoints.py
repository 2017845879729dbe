from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from app.core.settings import Settings
from app.main import create_app

NEW_USER = {
    "email": "new.hire@company.com",
    "password": "SecurePass123!",
    "firstName": "New",
    "lastName": "Hire",
    "employeeId": "EMP100",
}


def test_register_creates_employee_and_returns_token(client):
    response = client.post("/api/auth/register", json=NEW_USER)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "User registered successfully"
    user = body["data"]["user"]
    assert user["email"] == "new.hire@company.com"
    assert user["employeeId"] == "EMP100"
    assert user["role"] == "EMPLOYEE"
    assert "hashedPassword" not in user
    assert body["data"]["tokens"]["accessToken"]

    login = client.post(
        "/api/auth/login", json={"email": NEW_USER["email"], "password": NEW_USER["password"]}
    )
    assert login.status_code == 200


def test_register_duplicate_email_conflicts(client):
    response = client.post("/api/auth/register", json={**NEW_USER, "email": "john.doe@company.com"})

    assert response.status_code == 409
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "conflict"
    assert body["error"] == "User with this email already exists"


def test_register_duplicate_employee_id_conflicts(client):
    response = client.post("/api/auth/register", json={**NEW_USER, "employeeId": "EMP001"})

    assert response.status_code == 409
    assert response.json()["error"] == "User with this employee ID already exists"


def test_register_weak_password_lists_violations(client):
    response = client.post("/api/auth/register", json={**NEW_USER, "password": "weak"})

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "validation_error"
    assert body["error"] == "Password does not meet security requirements"
    assert len(body["details"]["errors"]) == 4


def test_register_missing_fields_is_validation_error(client):
    response = client.post("/api/auth/register", json={"email": "x@company.com", "password": "Secret123!"})

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "validation_error"
    assert body["error"].startswith("firstName")
    assert "Secret123!" not in response.text


def test_login_with_demo_account(client):
    response = client.post(
        "/api/auth/login", json={"email": "john.doe@company.com", "password": "password123"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    assert body["data"]["user"]["employeeId"] == "EMP001"
    assert body["data"]["tokens"]["tokenType"] == "bearer"
    assert body["data"]["tokens"]["expiresIn"] == 1440 * 60


def test_login_with_wrong_password_or_unknown_email(client):
    wrong = client.post("/api/auth/login", json={"email": "john.doe@company.com", "password": "nope"})
    unknown = client.post("/api/auth/login", json={"email": "ghost@company.com", "password": "nope"})

    for response in (wrong, unknown):
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_login_disabled_account(client, container):
    user = await container.users.find_by_email("jane.smith@company.com")
    user.is_active = False

    response = client.post(
        "/api/auth/login", json={"email": "jane.smith@company.com", "password": "password123"}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "Account is disabled"


def test_profile_requires_token(client):
    response = client.get("/api/auth/profile")

    assert response.status_code == 401
    assert response.json()["error"] == "Access token is required"


def test_profile_rejects_garbage_token(client):
    response = client.get("/api/auth/profile", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid token"


def test_profile_returns_current_user(client, employee_headers):
    response = client.get("/api/auth/profile", headers=employee_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == "john.doe@company.com"
    assert data["firstName"] == "John"


@pytest.mark.asyncio
async def test_expired_token_is_unauthorized(client, container):
    user = await container.users.find_by_email("john.doe@company.com")
    token = container.tokens.create_access_token(
        user_id=user.id, email=user.email, role=user.role.value, expires_delta=timedelta(seconds=-5)
    )
    response = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["error"] == "Token expired"


def test_validate_token(client, employee_headers):
    token = employee_headers["Authorization"].split(" ", 1)[1]

    valid = client.post("/api/auth/validate", json={"token": token})
    assert valid.status_code == 200
    assert valid.json()["message"] == "Token is valid"
    assert valid.json()["data"]["employeeId"] == "EMP001"

    invalid = client.post("/api/auth/validate", json={"token": "bogus"})
    assert invalid.status_code == 401
    assert invalid.json()["error"] == "Invalid token"


def test_logout(client, employee_headers):
    response = client.post("/api/auth/logout", headers=employee_headers)

    assert response.status_code == 200
    body = response.json()
    assert body == {"success": True, "data": None, "message": "Logout successful"}


def test_login_rate_limit_follows_app_config(container):
    config = Settings(ENVIRONMENT="test", SECRET_KEY="limit-secret", RATE_LIMIT_PER_MINUTE=2)
    client = TestClient(create_app(config, container))
    credentials = {"email": "john.doe@company.com", "password": "password123"}

    statuses = [client.post("/api/auth/login", json=credentials).status_code for _ in range(3)]

    assert statuses == [200, 200, 429]
    limited = client.post("/api/auth/login", json=credentials).json()
    assert limited["success"] is False
    assert limited["code"] == "rate_limited"
    assert client.get("/health").status_code == 200


def test_rate_limit_counters_are_per_app(client, container):
    config = Settings(ENVIRONMENT="test", SECRET_KEY="limit-secret", RATE_LIMIT_PER_MINUTE=1)
    strict = TestClient(create_app(config, container))
    credentials = {"email": "john.doe@company.com", "password": "password123"}

    assert strict.post("/api/auth/login", json=credentials).status_code == 200
    assert strict.post("/api/auth/login", json=credentials).status_code == 429
    assert client.post("/api/auth/login", json=credentials).status_code == 200
