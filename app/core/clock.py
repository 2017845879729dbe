from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Protocol
from uuid import uuid4


class Clock(Protocol):
    """Time and identifier source handed to services at construction."""

    def now(self) -> datetime:
        ...

    def today(self) -> date:
        ...

    def new_id(self) -> str:
        ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def today(self) -> date:
        return self.now().date()

    def new_id(self) -> str:
        return str(uuid4())
