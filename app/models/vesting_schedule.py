from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class VestingSchedule:
    id: str
    total_years: int
    cliff_months: int
    vesting_interval_months: int = 1
    name: str = ""
    description: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.total_years <= 0:
            raise ValueError("total_years must be positive")
        if not 0 <= self.cliff_months <= self.total_months:
            raise ValueError("cliff_months must be between 0 and total_years * 12")
        if self.vesting_interval_months < 1:
            raise ValueError("vesting_interval_months must be at least 1")

    @property
    def total_months(self) -> int:
        return self.total_years * 12
