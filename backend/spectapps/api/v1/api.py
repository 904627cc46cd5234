from fastapi import APIRouter

from spectapps.api.v1.endpoints import generation, history

api_router = APIRouter()

api_router.include_router(generation.router, prefix="/generations", tags=["generation"])
api_router.include_router(history.router, prefix="/history", tags=["history"])
