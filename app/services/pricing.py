"""Market price sources used to value exercisable shares."""

from decimal import Decimal
from typing import Protocol

from app.models import as_decimal


class PriceProvider(Protocol):
    async def current_price(self) -> Decimal:
        """Return the current market price per share."""
        ...


class FixedPriceProvider:
    """Constant price; stands in for a live quote feed."""

    def __init__(self, price: Decimal | float) -> None:
        self._price = as_decimal(price)
        if self._price < 0:
            raise ValueError("price must not be negative")

    async def current_price(self) -> Decimal:
        return self._price
