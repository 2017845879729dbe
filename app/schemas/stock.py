from __future__ import annotations

from datetime import date, datetime

from pydantic import Field

from app.models.types import (
    GrantStatus,
    GrantType,
    TransactionStatus,
    TransactionType,
    VestingEventStatus,
)
from app.schemas.common import CamelModel, Money


class VestingScheduleOut(CamelModel):
    id: str
    name: str
    description: str
    total_years: int
    cliff_months: int
    vesting_interval_months: int


class StockGrantOut(CamelModel):
    id: str
    employee_id: str
    grant_date: date
    total_shares: float
    vesting_schedule_id: str
    grant_price: Money
    grant_type: GrantType
    status: GrantStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None


class VestingEventOut(CamelModel):
    id: str
    employee_id: str
    grant_id: str
    vesting_date: date
    shares_vested: float
    cumulative_vested: float
    status: VestingEventStatus


class TransactionOut(CamelModel):
    id: str
    employee_id: str
    grant_id: str
    transaction_type: TransactionType
    shares: float
    price_per_share: Money
    total_amount: Money
    transaction_date: datetime
    status: TransactionStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TransactionCreate(CamelModel):
    grant_id: str = Field(min_length=1)
    transaction_type: TransactionType = TransactionType.EXERCISE
    shares: float = Field(gt=0)


class StockBalance(CamelModel):
    employee_id: str
    total_granted: float
    total_vested: float
    total_exercised: float
    available_to_exercise: float
    unvested: float
    current_market_price: Money
    current_value: Money
    last_updated: datetime


class GrantVestingSummaryOut(CamelModel):
    vested_shares: float
    unvested_shares: float
    next_vesting_date: date | None = None


class StockGrantDetail(CamelModel):
    grant: StockGrantOut
    vesting_events: list[VestingEventOut] = Field(default_factory=list)
    vesting_schedule: VestingScheduleOut | None = None
    summary: GrantVestingSummaryOut


class DashboardSummary(CamelModel):
    balance: StockBalance
    recent_transactions: list[TransactionOut] = Field(default_factory=list)
    upcoming_vesting: list[VestingEventOut] = Field(default_factory=list)
    grants_count: int
