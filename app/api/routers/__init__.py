from fastapi import APIRouter

from app.api.routers import auth, health, stock

api_router = APIRouter()
api_router.include_router(health.meta_router)
api_router.include_router(auth.router)
api_router.include_router(stock.router)

health_router = health.router

__all__ = ["api_router", "health_router"]
