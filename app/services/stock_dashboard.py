from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Iterable

from app.core.clock import Clock
from app.core.errors import reraise_as_internal
from app.models import StockGrant, Transaction, VestingEvent
from app.schemas.stock import DashboardSummary, StockBalance, TransactionOut, VestingEventOut
from app.services import vesting_engine
from app.services.stock_balance import BalanceAggregator
from app.services.stock_grants import StockService

RECENT_TRANSACTIONS_LIMIT = 5
UPCOMING_VESTING_LIMIT = 5


def build_dashboard_summary_from_data(
    *,
    balance: StockBalance,
    transactions: Iterable[Transaction],
    events: Iterable[VestingEvent],
    grants: Iterable[StockGrant],
    as_of_date: date,
) -> DashboardSummary:
    recent = sorted(transactions, key=lambda tx: tx.transaction_date, reverse=True)
    upcoming = vesting_engine.upcoming_events(events, as_of_date, limit=UPCOMING_VESTING_LIMIT)
    return DashboardSummary(
        balance=balance,
        recent_transactions=[
            TransactionOut.model_validate(tx) for tx in recent[:RECENT_TRANSACTIONS_LIMIT]
        ],
        upcoming_vesting=[VestingEventOut.model_validate(event) for event in upcoming],
        grants_count=len(list(grants)),
    )


class DashboardComposer:
    """One-call dashboard: balance, recent activity, next vesting dates."""

    def __init__(
        self,
        *,
        balances: BalanceAggregator,
        stock_service: StockService,
        clock: Clock,
        logger: logging.Logger | None = None,
    ) -> None:
        self.balances = balances
        self.stock_service = stock_service
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

    @reraise_as_internal("Failed to retrieve dashboard summary")
    async def compose_dashboard(self, employee_id: str) -> DashboardSummary:
        as_of_date = self.clock.today()
        balance, transactions, events, grants = await asyncio.gather(
            self.balances.calculate_balance(employee_id, as_of_date),
            self.stock_service.get_transaction_history(employee_id),
            self.stock_service.get_vesting_events(employee_id, as_of_date),
            self.stock_service.list_grants(employee_id),
        )
        summary = build_dashboard_summary_from_data(
            balance=balance,
            transactions=transactions,
            events=events,
            grants=grants,
            as_of_date=as_of_date,
        )
        self.logger.info(
            "Dashboard summary retrieved employee_id=%s grants=%s upcoming=%s",
            employee_id,
            summary.grants_count,
            len(summary.upcoming_vesting),
        )
        return summary
