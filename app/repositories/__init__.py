from app.repositories.memory import InMemoryStockRepository, InMemoryUserRepository
from app.repositories.protocols import StockRepository, UserRepository

__all__ = [
    "InMemoryStockRepository",
    "InMemoryUserRepository",
    "StockRepository",
    "UserRepository",
]
