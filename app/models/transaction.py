from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from app.models.money import amount_for, as_decimal
from app.models.types import TransactionStatus, TransactionType


@dataclass(frozen=True)
class Transaction:
    id: str
    employee_id: str
    grant_id: str
    transaction_type: TransactionType
    shares: float
    price_per_share: Decimal
    transaction_date: datetime
    status: TransactionStatus = TransactionStatus.COMPLETED
    idempotency_key: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "price_per_share", as_decimal(self.price_per_share))

    @property
    def total_amount(self) -> Decimal:
        return amount_for(self.shares, self.price_per_share)

    @property
    def is_completed_exercise(self) -> bool:
        return (
            self.transaction_type == TransactionType.EXERCISE
            and self.status == TransactionStatus.COMPLETED
        )
