from fastapi import APIRouter

from resizer.api.health import router as health_router
from resizer.api.resize import router as resize_router

api_router = APIRouter()
api_router.include_router(health_router, tags=["health"])
api_router.include_router(resize_router, tags=["image"])
