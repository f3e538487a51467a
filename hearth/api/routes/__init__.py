"""API routes package."""

from fastapi import APIRouter

from hearth.api.routes import admin, health, inquiries, properties, users

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(users.router)
api_router.include_router(properties.router)
api_router.include_router(admin.router)
api_router.include_router(inquiries.router)
