from typing import Optional

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.container import ServiceContainer
from app.core.context import bind_user
from app.core.errors import AuthenticationError
from app.models import User
from app.services import authz
from app.services.auth import AuthService
from app.services.stock_balance import BalanceAggregator
from app.services.stock_dashboard import DashboardComposer
from app.services.stock_grants import StockService

bearer_scheme = HTTPBearer(auto_error=False)


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_auth_service(container: ServiceContainer = Depends(get_container)) -> AuthService:
    return container.auth


def get_stock_service(container: ServiceContainer = Depends(get_container)) -> StockService:
    return container.stock_service


def get_balance_aggregator(container: ServiceContainer = Depends(get_container)) -> BalanceAggregator:
    return container.balances


def get_dashboard_composer(container: ServiceContainer = Depends(get_container)) -> DashboardComposer:
    return container.dashboard


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token is required")
    user = await auth_service.authenticate(credentials.credentials)
    bind_user(user.id, user.employee_id)
    return user


def get_employee_scope(
    employee_id: Optional[str] = Query(
        default=None,
        alias="employeeId",
        description="Target employee; only admins may name someone else",
    ),
    current_user: User = Depends(get_current_user),
) -> str:
    return authz.resolve_employee_scope(current_user, employee_id)
