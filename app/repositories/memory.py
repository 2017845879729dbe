from __future__ import annotations

from typing import Iterable, Optional

from app.models import StockGrant, Transaction, User, VestingSchedule


class InMemoryUserRepository:
    """Identity store backed by a list; seeded once, then append-only."""

    def __init__(self, users: Iterable[User] = ()) -> None:
        self._users: list[User] = list(users)

    async def find_by_id(self, user_id: str) -> Optional[User]:
        return next((user for user in self._users if user.id == user_id), None)

    async def find_by_email(self, email: str) -> Optional[User]:
        needle = email.strip().lower()
        return next((user for user in self._users if user.email.lower() == needle), None)

    async def find_by_employee_id(self, employee_id: str) -> Optional[User]:
        return next((user for user in self._users if user.employee_id == employee_id), None)

    async def create(self, user: User) -> User:
        self._users.append(user)
        return user


class InMemoryStockRepository:
    def __init__(
        self,
        *,
        schedules: Iterable[VestingSchedule] = (),
        grants: Iterable[StockGrant] = (),
        transactions: Iterable[Transaction] = (),
    ) -> None:
        self._schedules: dict[str, VestingSchedule] = {schedule.id: schedule for schedule in schedules}
        self._grants: list[StockGrant] = list(grants)
        self._transactions: list[Transaction] = list(transactions)

    async def find_grants_by_employee_id(self, employee_id: str) -> list[StockGrant]:
        return [grant for grant in self._grants if grant.employee_id == employee_id]

    async def find_grant_by_id(self, grant_id: str) -> Optional[StockGrant]:
        return next((grant for grant in self._grants if grant.id == grant_id), None)

    async def find_schedule_by_id(self, schedule_id: str) -> Optional[VestingSchedule]:
        return self._schedules.get(schedule_id)

    async def find_schedules_by_ids(self, schedule_ids: set[str]) -> dict[str, VestingSchedule]:
        return {
            schedule_id: self._schedules[schedule_id]
            for schedule_id in schedule_ids
            if schedule_id in self._schedules
        }

    async def find_transactions_by_employee_id(self, employee_id: str) -> list[Transaction]:
        return [tx for tx in self._transactions if tx.employee_id == employee_id]

    async def find_transaction_by_idempotency_key(
        self, employee_id: str, idempotency_key: str
    ) -> Optional[Transaction]:
        return next(
            (
                tx
                for tx in self._transactions
                if tx.employee_id == employee_id and tx.idempotency_key == idempotency_key
            ),
            None,
        )

    async def create_transaction(self, transaction: Transaction) -> Transaction:
        self._transactions.append(transaction)
        return transaction
