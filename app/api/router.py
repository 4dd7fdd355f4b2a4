from fastapi import APIRouter

from app.api.routes import documents, health, translation

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(translation.router, tags=["translation"])
api_router.include_router(documents.router, tags=["documents"])
