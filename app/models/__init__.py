from app.models.money import amount_for, as_decimal
from app.models.stock_grant import StockGrant
from app.models.transaction import Transaction
from app.models.types import (
    GrantStatus,
    GrantType,
    TransactionStatus,
    TransactionType,
    UserRole,
    VestingEventStatus,
)
from app.models.user import User
from app.models.vesting_event import VestingEvent
from app.models.vesting_schedule import VestingSchedule

__all__ = [
    "amount_for",
    "as_decimal",
    "GrantStatus",
    "GrantType",
    "StockGrant",
    "Transaction",
    "TransactionStatus",
    "TransactionType",
    "User",
    "UserRole",
    "VestingEvent",
    "VestingEventStatus",
    "VestingSchedule",
]
