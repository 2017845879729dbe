from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from app.models.money import as_decimal
from app.models.types import GrantStatus, GrantType


@dataclass(frozen=True)
class StockGrant:
    id: str
    employee_id: str
    grant_date: date
    total_shares: float
    vesting_schedule_id: str
    grant_price: Decimal
    grant_type: GrantType
    status: GrantStatus = GrantStatus.ACTIVE
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "grant_price", as_decimal(self.grant_price))
        if self.total_shares <= 0:
            raise ValueError("total_shares must be positive")
        if self.grant_price < 0:
            raise ValueError("grant_price must not be negative")
