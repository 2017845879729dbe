from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable

from app.core.clock import Clock
from app.core.errors import reraise_as_internal
from app.models import StockGrant, Transaction, VestingEvent, amount_for
from app.repositories import StockRepository, UserRepository
from app.schemas.stock import StockBalance
from app.services import authz, vesting_engine
from app.services.pricing import PriceProvider


def build_balance_from_data(
    *,
    employee_id: str,
    grants: Iterable[StockGrant],
    events: Iterable[VestingEvent],
    transactions: Iterable[Transaction],
    market_price: Decimal,
    last_updated: datetime,
) -> StockBalance:
    total_granted = sum(grant.total_shares for grant in grants)
    total_vested = vesting_engine.vested_shares(events)
    total_exercised = sum(tx.shares for tx in transactions if tx.is_completed_exercise)
    available = max(0.0, total_vested - total_exercised)
    return StockBalance(
        employee_id=employee_id,
        total_granted=total_granted,
        total_vested=total_vested,
        total_exercised=total_exercised,
        available_to_exercise=available,
        unvested=total_granted - total_vested,
        current_market_price=market_price,
        current_value=amount_for(available, market_price),
        last_updated=last_updated,
    )


class BalanceAggregator:
    """Point-in-time share balance for one employee. Pure read."""

    def __init__(
        self,
        *,
        users: UserRepository,
        stock: StockRepository,
        prices: PriceProvider,
        clock: Clock,
        logger: logging.Logger | None = None,
    ) -> None:
        self.users = users
        self.stock = stock
        self.prices = prices
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

    @reraise_as_internal("Failed to retrieve stock balance")
    async def calculate_balance(self, employee_id: str, as_of: date | None = None) -> StockBalance:
        await authz.require_employee(self.users, employee_id)
        as_of_date = as_of or self.clock.today()

        grants, transactions, market_price = await asyncio.gather(
            self.stock.find_grants_by_employee_id(employee_id),
            self.stock.find_transactions_by_employee_id(employee_id),
            self.prices.current_price(),
        )
        schedules = await self.stock.find_schedules_by_ids(
            {grant.vesting_schedule_id for grant in grants}
        )
        events = vesting_engine.events_for_grants(grants, schedules, as_of_date)

        balance = build_balance_from_data(
            employee_id=employee_id,
            grants=grants,
            events=events,
            transactions=transactions,
            market_price=market_price,
            last_updated=self.clock.now(),
        )
        if balance.unvested < -vesting_engine.SHARE_TOLERANCE:
            self.logger.warning(
                "Vested shares exceed granted shares employee_id=%s granted=%s vested=%s",
                employee_id,
                balance.total_granted,
                balance.total_vested,
            )
        self.logger.info(
            "Stock balance retrieved employee_id=%s total_granted=%s total_vested=%s available=%s",
            employee_id,
            balance.total_granted,
            balance.total_vested,
            balance.available_to_exercise,
        )
        return balance
