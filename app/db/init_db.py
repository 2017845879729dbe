from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

from passlib.context import CryptContext

from app.core.clock import Clock
from app.models import (
    GrantStatus,
    GrantType,
    StockGrant,
    Transaction,
    TransactionStatus,
    TransactionType,
    User,
    UserRole,
    VestingSchedule,
)
from app.repositories import InMemoryStockRepository, InMemoryUserRepository

DEMO_USERS = (
    ("john.doe@company.com", "John", "Doe", "EMP001", UserRole.EMPLOYEE),
    ("jane.smith@company.com", "Jane", "Smith", "EMP002", UserRole.EMPLOYEE),
    ("admin@company.com", "Admin", "User", "ADM001", UserRole.ADMIN),
)


def build_demo_users(clock: Clock, password_context: CryptContext, password: str) -> list[User]:
    """Seed accounts sharing one demo password; hashed once."""
    hashed = password_context.hash(password)
    now = clock.now()
    return [
        User(
            id=clock.new_id(),
            email=email,
            hashed_password=hashed,
            first_name=first_name,
            last_name=last_name,
            employee_id=employee_id,
            role=role,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        for email, first_name, last_name, employee_id, role in DEMO_USERS
    ]


def build_demo_stock(clock: Clock) -> tuple[list[VestingSchedule], list[StockGrant], list[Transaction]]:
    now = clock.now()
    schedule = VestingSchedule(
        id=clock.new_id(),
        name="Standard 4-Year Vesting",
        description="25% after 1 year cliff, then monthly for 3 years",
        total_years=4,
        cliff_months=12,
        vesting_interval_months=1,
        created_at=now,
        updated_at=now,
    )
    john_grant = StockGrant(
        id=clock.new_id(),
        employee_id="EMP001",
        grant_date=date(2023, 1, 15),
        total_shares=1000,
        vesting_schedule_id=schedule.id,
        grant_price=Decimal("10.00"),
        grant_type=GrantType.ISO,
        status=GrantStatus.ACTIVE,
        created_at=now,
        updated_at=now,
    )
    jane_grant = StockGrant(
        id=clock.new_id(),
        employee_id="EMP002",
        grant_date=date(2023, 3, 1),
        total_shares=500,
        vesting_schedule_id=schedule.id,
        grant_price=Decimal("12.00"),
        grant_type=GrantType.RSU,
        status=GrantStatus.ACTIVE,
        created_at=now,
        updated_at=now,
    )
    exercise = Transaction(
        id=clock.new_id(),
        employee_id="EMP001",
        grant_id=john_grant.id,
        transaction_type=TransactionType.EXERCISE,
        shares=100,
        price_per_share=Decimal("10.00"),
        transaction_date=datetime(2024, 1, 15, tzinfo=timezone.utc),
        status=TransactionStatus.COMPLETED,
        created_at=now,
        updated_at=now,
    )
    return [schedule], [john_grant, jane_grant], [exercise]


def init_db(
    clock: Clock, password_context: CryptContext, demo_password: str
) -> tuple[InMemoryUserRepository, InMemoryStockRepository]:
    """Build stores holding the demo users, schedule, grants and one exercise."""
    schedules, grants, transactions = build_demo_stock(clock)
    users = InMemoryUserRepository(build_demo_users(clock, password_context, demo_password))
    stock = InMemoryStockRepository(schedules=schedules, grants=grants, transactions=transactions)
    return users, stock
