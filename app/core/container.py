from __future__ import annotations

import logging
from dataclasses import dataclass

from passlib.context import CryptContext

from app.core.clock import Clock, SystemClock
from app.core.security import TokenService, build_password_context
from app.core.settings import Settings
from app.db.init_db import init_db
from app.repositories import (
    InMemoryStockRepository,
    InMemoryUserRepository,
    StockRepository,
    UserRepository,
)
from app.services.auth import AuthService
from app.services.pricing import FixedPriceProvider, PriceProvider
from app.services.stock_balance import BalanceAggregator
from app.services.stock_dashboard import DashboardComposer
from app.services.stock_grants import StockService

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    settings: Settings
    clock: Clock
    users: UserRepository
    stock: StockRepository
    prices: PriceProvider
    password_context: CryptContext
    tokens: TokenService
    auth: AuthService
    balances: BalanceAggregator
    stock_service: StockService
    dashboard: DashboardComposer


def build_container(
    config: Settings,
    *,
    clock: Clock | None = None,
    users: UserRepository | None = None,
    stock: StockRepository | None = None,
    prices: PriceProvider | None = None,
) -> ServiceContainer:
    """Wire stores and services; seeds demo data unless stores are supplied."""
    clock = clock or SystemClock()
    password_context = build_password_context(config.bcrypt_rounds)

    if users is None or stock is None:
        if config.seed_demo_data:
            seeded_users, seeded_stock = init_db(clock, password_context, config.demo_user_password)
            logger.info("Demo data seeded")
        else:
            seeded_users, seeded_stock = InMemoryUserRepository(), InMemoryStockRepository()
        users = users or seeded_users
        stock = stock or seeded_stock

    prices = prices or FixedPriceProvider(config.current_market_price)
    tokens = TokenService(
        secret_key=config.secret_key,
        algorithm=config.jwt_algorithm,
        expire_minutes=config.access_token_expire_minutes,
        clock=clock,
    )
    balances = BalanceAggregator(
        users=users,
        stock=stock,
        prices=prices,
        clock=clock,
        logger=logging.getLogger("app.services.stock_balance"),
    )
    stock_service = StockService(
        users=users,
        stock=stock,
        prices=prices,
        clock=clock,
        logger=logging.getLogger("app.services.stock_grants"),
    )
    return ServiceContainer(
        settings=config,
        clock=clock,
        users=users,
        stock=stock,
        prices=prices,
        password_context=password_context,
        tokens=tokens,
        auth=AuthService(
            users=users,
            tokens=tokens,
            clock=clock,
            password_context=password_context,
            password_min_length=config.password_min_length,
            logger=logging.getLogger("app.services.auth"),
        ),
        balances=balances,
        stock_service=stock_service,
        dashboard=DashboardComposer(
            balances=balances,
            stock_service=stock_service,
            clock=clock,
            logger=logging.getLogger("app.services.stock_dashboard"),
        ),
    )
