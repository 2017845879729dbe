from fastapi import APIRouter, Request

from app.core.health import api_banner_payload, live_payload
from app.core.limiter import rate_limit_exempt

router = APIRouter(tags=["health"])
meta_router = APIRouter(tags=["meta"])


@router.get("/health", summary="Service liveness check")
@rate_limit_exempt
async def read_health(request: Request) -> dict:
    return await live_payload(request.app.state.settings)


@meta_router.get("/", summary="API banner")
@rate_limit_exempt
async def api_banner(request: Request) -> dict:
    return await api_banner_payload(request.app.state.settings)
