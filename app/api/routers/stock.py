from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Response, status

from app.api import deps
from app.models import User
from app.schemas.common import ApiResponse
from app.schemas.stock import (
    DashboardSummary,
    StockBalance,
    StockGrantDetail,
    StockGrantOut,
    TransactionCreate,
    TransactionOut,
    VestingEventOut,
)
from app.services import authz
from app.services.stock_balance import BalanceAggregator
from app.services.stock_dashboard import DashboardComposer
from app.services.stock_grants import StockService

router = APIRouter(prefix="/stock", tags=["stock"])


@router.get("/dashboard", response_model=ApiResponse[DashboardSummary], summary="Dashboard summary")
async def get_dashboard(
    employee_id: str = Depends(deps.get_employee_scope),
    composer: DashboardComposer = Depends(deps.get_dashboard_composer),
) -> ApiResponse[DashboardSummary]:
    return ApiResponse(data=await composer.compose_dashboard(employee_id))


@router.get("/balance", response_model=ApiResponse[StockBalance], summary="Stock balance snapshot")
async def get_balance(
    employee_id: str = Depends(deps.get_employee_scope),
    balances: BalanceAggregator = Depends(deps.get_balance_aggregator),
) -> ApiResponse[StockBalance]:
    return ApiResponse(data=await balances.calculate_balance(employee_id))


@router.get("/grants", response_model=ApiResponse[list[StockGrantOut]], summary="List stock grants")
async def list_grants(
    employee_id: str = Depends(deps.get_employee_scope),
    stock_service: StockService = Depends(deps.get_stock_service),
) -> ApiResponse[list[StockGrantOut]]:
    grants = await stock_service.list_grants(employee_id)
    return ApiResponse(data=[StockGrantOut.model_validate(grant) for grant in grants])


@router.get(
    "/grants/{grant_id}",
    response_model=ApiResponse[StockGrantDetail],
    summary="Stock grant with vesting events and schedule",
)
async def get_grant_details(
    grant_id: str,
    employee_id: Optional[str] = Query(default=None, alias="employeeId"),
    current_user: User = Depends(deps.get_current_user),
    stock_service: StockService = Depends(deps.get_stock_service),
) -> ApiResponse[StockGrantDetail]:
    if authz.is_elevated(current_user) and not employee_id:
        owner = None
    else:
        owner = authz.resolve_employee_scope(current_user, employee_id)
    return ApiResponse(data=await stock_service.get_grant_details(grant_id, owner))


@router.get("/vesting", response_model=ApiResponse[list[VestingEventOut]], summary="Vesting events")
async def get_vesting_schedule(
    employee_id: str = Depends(deps.get_employee_scope),
    stock_service: StockService = Depends(deps.get_stock_service),
) -> ApiResponse[list[VestingEventOut]]:
    events = await stock_service.get_vesting_events(employee_id)
    return ApiResponse(data=[VestingEventOut.model_validate(event) for event in events])


@router.get(
    "/transactions",
    response_model=ApiResponse[list[TransactionOut]],
    summary="Transaction history, most recent first",
)
async def get_transactions(
    employee_id: str = Depends(deps.get_employee_scope),
    stock_service: StockService = Depends(deps.get_stock_service),
) -> ApiResponse[list[TransactionOut]]:
    transactions = await stock_service.get_transaction_history(employee_id)
    return ApiResponse(data=[TransactionOut.model_validate(tx) for tx in transactions])


@router.post(
    "/transactions",
    response_model=ApiResponse[TransactionOut],
    status_code=status.HTTP_201_CREATED,
    summary="Record an exercise or sale",
)
async def create_transaction(
    payload: TransactionCreate,
    response: Response,
    idempotency_key: Optional[str] = Header(default=None, alias="Idempotency-Key"),
    employee_id: str = Depends(deps.get_employee_scope),
    stock_service: StockService = Depends(deps.get_stock_service),
) -> ApiResponse[TransactionOut]:
    transaction, created = await stock_service.record_transaction(
        employee_id, payload, idempotency_key=idempotency_key
    )
    if not created:
        response.status_code = status.HTTP_200_OK
    return ApiResponse(
        data=TransactionOut.model_validate(transaction),
        message="Transaction recorded" if created else "Transaction already recorded",
    )
