from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from app.models.types import VestingEventStatus


@dataclass(frozen=True)
class VestingEvent:
    """One vesting occurrence of a grant; ``status`` is projected at read time."""

    id: str
    employee_id: str
    grant_id: str
    vesting_date: date
    shares_vested: float
    cumulative_vested: float
    status: VestingEventStatus
