from datetime import date, datetime, timedelta, timezone

import pytest

from conftest import FixedClock, make_grant, make_schedule, make_user
from app.models import Transaction, TransactionType
from app.repositories import InMemoryStockRepository, InMemoryUserRepository
from app.services.pricing import FixedPriceProvider
from app.services.stock_balance import BalanceAggregator
from app.services.stock_dashboard import DashboardComposer
from app.services.stock_grants import StockService


def _composer(*, grants=(), transactions=()) -> DashboardComposer:
    clock = FixedClock()
    users = InMemoryUserRepository([make_user()])
    stock = InMemoryStockRepository(
        schedules=[make_schedule()], grants=grants, transactions=transactions
    )
    prices = FixedPriceProvider(25.0)
    return DashboardComposer(
        balances=BalanceAggregator(users=users, stock=stock, prices=prices, clock=clock),
        stock_service=StockService(users=users, stock=stock, prices=prices, clock=clock),
        clock=clock,
    )


@pytest.mark.asyncio
async def test_dashboard_for_employee_without_grants():
    summary = await _composer().compose_dashboard("EMP001")

    assert summary.grants_count == 0
    assert summary.recent_transactions == []
    assert summary.upcoming_vesting == []
    assert summary.balance.total_granted == 0
    assert summary.balance.current_value == 0


@pytest.mark.asyncio
async def test_dashboard_limits_recent_and_upcoming_lists():
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    transactions = [
        Transaction(
            id=f"tx-{day}",
            employee_id="EMP001",
            grant_id="grant-1",
            transaction_type=TransactionType.EXERCISE,
            shares=1,
            price_per_share=10.0,
            transaction_date=base + timedelta(days=day),
        )
        for day in range(7)
    ]
    summary = await _composer(grants=[make_grant()], transactions=transactions).compose_dashboard("EMP001")

    assert summary.grants_count == 1
    assert [tx.id for tx in summary.recent_transactions] == [f"tx-{day}" for day in (6, 5, 4, 3, 2)]
    assert len(summary.upcoming_vesting) == 5
    assert summary.upcoming_vesting[0].vesting_date == date(2025, 7, 15)
    assert all(event.vesting_date > date(2025, 6, 15) for event in summary.upcoming_vesting)
    assert summary.balance.total_exercised == 7
