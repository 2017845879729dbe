"""Global test fixtures and shared test infrastructure.

Provides:
- Environment variable defaults (must be set before any app import)
- FixedClock pinned to 2025-06-15 with sequential ids
- Model factories (make_schedule, make_grant, make_user)
- An app wired with seeded demo data and the fixed clock
- Bearer-token helpers for the demo accounts
"""

from __future__ import annotations

import os

# Environment defaults: must be set before importing the app, which triggers
# pydantic Settings validation on import.
os.environ.setdefault("SECRET_KEY", "test-secret-key-boot")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_PER_MINUTE", "1000")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import itertools
from datetime import date, datetime, timezone
from typing import Any
from uuid import UUID

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app.core.container import ServiceContainer, build_container
from app.core.security import build_password_context
from app.core.settings import Settings, get_settings
from app.main import create_app
from app.models import GrantType, StockGrant, User, UserRole, VestingSchedule

FIXED_NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)
TEST_PASSWORD_CONTEXT = build_password_context(4)


class FixedClock:
    """Deterministic clock: frozen time and sequential UUID strings."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self._now = now
        self._ids = itertools.count(1)

    def now(self) -> datetime:
        return self._now

    def today(self) -> date:
        return self._now.date()

    def new_id(self) -> str:
        return str(UUID(int=next(self._ids)))


# ---------------------------------------------------------------------------
# Model factories
# ---------------------------------------------------------------------------


def make_schedule(**overrides: Any) -> VestingSchedule:
    defaults: dict[str, Any] = dict(
        id="schedule-4y",
        name="Standard 4-Year Vesting",
        total_years=4,
        cliff_months=12,
        vesting_interval_months=1,
    )
    defaults.update(overrides)
    return VestingSchedule(**defaults)


def make_grant(**overrides: Any) -> StockGrant:
    defaults: dict[str, Any] = dict(
        id="grant-1",
        employee_id="EMP001",
        grant_date=date(2023, 1, 15),
        total_shares=1000,
        vesting_schedule_id="schedule-4y",
        grant_price=10.0,
        grant_type=GrantType.ISO,
    )
    defaults.update(overrides)
    return StockGrant(**defaults)


def make_user(**overrides: Any) -> User:
    defaults: dict[str, Any] = dict(
        id="user-1",
        email="john.doe@company.com",
        hashed_password=TEST_PASSWORD_CONTEXT.hash("password123"),
        first_name="John",
        last_name="Doe",
        employee_id="EMP001",
        role=UserRole.EMPLOYEE,
        created_at=FIXED_NOW,
        updated_at=FIXED_NOW,
    )
    defaults.update(overrides)
    return User(**defaults)


# ---------------------------------------------------------------------------
# Shared pytest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def test_settings() -> Settings:
    return get_settings()


@pytest.fixture
def container(test_settings, fixed_clock) -> ServiceContainer:
    return build_container(test_settings, clock=fixed_clock)


@pytest.fixture
def client(test_settings, container) -> TestClient:
    return TestClient(create_app(test_settings, container))


async def bearer_headers(container: ServiceContainer, email: str) -> dict[str, str]:
    """Return ``Authorization`` headers for a seeded account by email."""
    user = await container.users.find_by_email(email)
    assert user is not None, email
    token = container.tokens.create_access_token(
        user_id=user.id, email=user.email, role=user.role.value
    )
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def employee_headers(container) -> dict[str, str]:
    return await bearer_headers(container, "john.doe@company.com")


@pytest_asyncio.fixture
async def admin_headers(container) -> dict[str, str]:
    return await bearer_headers(container, "admin@company.com")
