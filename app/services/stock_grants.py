from __future__ import annotations

import asyncio
import logging
from datetime import date

from app.core.clock import Clock
from app.core.errors import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
    reraise_as_internal,
)
from app.models import (
    GrantStatus,
    StockGrant,
    Transaction,
    TransactionStatus,
    TransactionType,
    VestingEvent,
)
from app.repositories import StockRepository, UserRepository
from app.schemas.stock import (
    GrantVestingSummaryOut,
    StockGrantDetail,
    StockGrantOut,
    TransactionCreate,
    VestingEventOut,
    VestingScheduleOut,
)
from app.services import authz, vesting_engine
from app.services.pricing import PriceProvider

RECORDABLE_TRANSACTION_TYPES = frozenset({TransactionType.EXERCISE, TransactionType.SALE})


def _completed_shares(
    transactions: list[Transaction], grant_id: str, transaction_type: TransactionType
) -> float:
    return sum(
        tx.shares
        for tx in transactions
        if tx.grant_id == grant_id
        and tx.transaction_type == transaction_type
        and tx.status == TransactionStatus.COMPLETED
    )


class StockService:
    """Employee-scoped reads over grants, vesting and transactions, plus exercise/sale recording."""

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
        self._write_lock = asyncio.Lock()

    @reraise_as_internal("Failed to retrieve stock grants")
    async def list_grants(self, employee_id: str) -> list[StockGrant]:
        await authz.require_employee(self.users, employee_id)
        grants = await self.stock.find_grants_by_employee_id(employee_id)
        grants.sort(key=lambda grant: grant.grant_date)
        self.logger.info("Stock grants retrieved employee_id=%s count=%s", employee_id, len(grants))
        return grants

    @reraise_as_internal("Failed to retrieve vesting schedule")
    async def get_vesting_events(
        self, employee_id: str, as_of: date | None = None
    ) -> list[VestingEvent]:
        await authz.require_employee(self.users, employee_id)
        grants = await self.stock.find_grants_by_employee_id(employee_id)
        schedules = await self.stock.find_schedules_by_ids(
            {grant.vesting_schedule_id for grant in grants}
        )
        missing = {grant.id for grant in grants if grant.vesting_schedule_id not in schedules}
        if missing:
            self.logger.warning(
                "Grants without a known vesting schedule employee_id=%s grant_ids=%s",
                employee_id,
                sorted(missing),
            )
        events = vesting_engine.events_for_grants(grants, schedules, as_of or self.clock.today())
        self.logger.info("Vesting schedule retrieved employee_id=%s count=%s", employee_id, len(events))
        return events

    @reraise_as_internal("Failed to retrieve transaction history")
    async def get_transaction_history(self, employee_id: str) -> list[Transaction]:
        await authz.require_employee(self.users, employee_id)
        transactions = await self.stock.find_transactions_by_employee_id(employee_id)
        transactions.sort(key=lambda tx: tx.transaction_date, reverse=True)
        self.logger.info(
            "Transaction history retrieved employee_id=%s count=%s", employee_id, len(transactions)
        )
        return transactions

    @reraise_as_internal("Failed to retrieve stock grant details")
    async def get_grant_details(
        self, grant_id: str, employee_id: str | None, as_of: date | None = None
    ) -> StockGrantDetail:
        """Grant with its vesting events and schedule.

        ``employee_id`` restricts the lookup to that employee's grants; ``None``
        skips the ownership check (elevated callers). A grant whose schedule
        cannot be found is returned with ``vesting_schedule=None`` and no events.
        """
        grant = await self.stock.find_grant_by_id(grant_id)
        if grant is None:
            raise NotFoundError("Stock grant not found")
        if employee_id is not None and grant.employee_id != employee_id:
            raise AuthorizationError("Access denied to this stock grant")

        as_of_date = as_of or self.clock.today()
        schedule = await self.stock.find_schedule_by_id(grant.vesting_schedule_id)
        if schedule is None:
            self.logger.warning(
                "Vesting schedule missing grant_id=%s schedule_id=%s",
                grant.id,
                grant.vesting_schedule_id,
            )
            events: list[VestingEvent] = []
        else:
            events = vesting_engine.generate_vesting_events(grant, schedule, as_of_date)
        summary = vesting_engine.summarize_grant(grant, events, as_of_date)

        self.logger.info(
            "Stock grant details retrieved grant_id=%s employee_id=%s events=%s",
            grant.id,
            grant.employee_id,
            len(events),
        )
        return StockGrantDetail(
            grant=StockGrantOut.model_validate(grant),
            vesting_events=[VestingEventOut.model_validate(event) for event in events],
            vesting_schedule=VestingScheduleOut.model_validate(schedule) if schedule else None,
            summary=GrantVestingSummaryOut(
                vested_shares=summary.vested_shares,
                unvested_shares=summary.unvested_shares,
                next_vesting_date=summary.next_vesting_date,
            ),
        )

    @reraise_as_internal("Failed to record transaction")
    async def record_transaction(
        self,
        employee_id: str,
        payload: TransactionCreate,
        idempotency_key: str | None = None,
    ) -> tuple[Transaction, bool]:
        """Append an exercise or sale; returns ``(transaction, created)``.

        A repeated ``idempotency_key`` for the same employee returns the
        transaction recorded the first time with ``created=False``.
        """
        if payload.transaction_type not in RECORDABLE_TRANSACTION_TYPES:
            raise ValidationError("Only EXERCISE and SALE transactions can be recorded")

        async with self._write_lock:
            if idempotency_key:
                existing = await self.stock.find_transaction_by_idempotency_key(
                    employee_id, idempotency_key
                )
                if existing is not None:
                    self.logger.info(
                        "Idempotent replay transaction_id=%s employee_id=%s",
                        existing.id,
                        employee_id,
                    )
                    return existing, False

            await authz.require_employee(self.users, employee_id)
            grant = await self.stock.find_grant_by_id(payload.grant_id)
            if grant is None:
                raise NotFoundError("Stock grant not found")
            if grant.employee_id != employee_id:
                raise AuthorizationError("Access denied to this stock grant")
            if grant.status != GrantStatus.ACTIVE:
                raise ValidationError(f"Stock grant is {grant.status.value}, not ACTIVE")

            transactions = await self.stock.find_transactions_by_employee_id(employee_id)
            exercised = _completed_shares(transactions, grant.id, TransactionType.EXERCISE)
            if payload.transaction_type == TransactionType.EXERCISE:
                schedule = await self.stock.find_schedule_by_id(grant.vesting_schedule_id)
                events = (
                    vesting_engine.generate_vesting_events(grant, schedule, self.clock.today())
                    if schedule
                    else []
                )
                available = max(0.0, vesting_engine.vested_shares(events) - exercised)
                price = grant.grant_price
            else:
                sold = _completed_shares(transactions, grant.id, TransactionType.SALE)
                available = max(0.0, exercised - sold)
                price = await self.prices.current_price()

            if payload.shares > available + vesting_engine.SHARE_TOLERANCE:
                raise ValidationError(
                    "Requested shares exceed shares available",
                    details={"requested": payload.shares, "available": available},
                )

            now = self.clock.now()
            transaction = await self.stock.create_transaction(
                Transaction(
                    id=self.clock.new_id(),
                    employee_id=employee_id,
                    grant_id=grant.id,
                    transaction_type=payload.transaction_type,
                    shares=payload.shares,
                    price_per_share=price,
                    transaction_date=now,
                    status=TransactionStatus.COMPLETED,
                    idempotency_key=idempotency_key,
                    created_at=now,
                    updated_at=now,
                )
            )
        self.logger.info(
            "Transaction recorded transaction_id=%s employee_id=%s type=%s shares=%s",
            transaction.id,
            employee_id,
            transaction.transaction_type.value,
            transaction.shares,
        )
        return transaction, True
