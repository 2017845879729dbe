"""Query interfaces the services depend on.

Any store (the in-memory demo store, or a database-backed one) only has to
provide these methods; the vesting engine and aggregator never see it.
"""

from typing import Optional, Protocol

from app.models import StockGrant, Transaction, User, VestingSchedule


class UserRepository(Protocol):
    """Identity store."""

    async def find_by_id(self, user_id: str) -> Optional[User]:
        ...

    async def find_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive lookup by email."""
        ...

    async def find_by_employee_id(self, employee_id: str) -> Optional[User]:
        ...

    async def create(self, user: User) -> User:
        """Persist a new user; uniqueness is checked by the caller."""
        ...


class StockRepository(Protocol):
    """Grant, schedule and transaction store."""

    async def find_grants_by_employee_id(self, employee_id: str) -> list[StockGrant]:
        ...

    async def find_grant_by_id(self, grant_id: str) -> Optional[StockGrant]:
        ...

    async def find_schedule_by_id(self, schedule_id: str) -> Optional[VestingSchedule]:
        ...

    async def find_schedules_by_ids(self, schedule_ids: set[str]) -> dict[str, VestingSchedule]:
        """Return the known schedules keyed by id; unknown ids are omitted."""
        ...

    async def find_transactions_by_employee_id(self, employee_id: str) -> list[Transaction]:
        ...

    async def find_transaction_by_idempotency_key(
        self, employee_id: str, idempotency_key: str
    ) -> Optional[Transaction]:
        ...

    async def create_transaction(self, transaction: Transaction) -> Transaction:
        """Append to the transaction log."""
        ...
