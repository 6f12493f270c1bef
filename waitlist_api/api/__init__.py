"""API routers."""

from fastapi import APIRouter

from waitlist_api.api import admin, health, waitlist

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(waitlist.router, prefix="/waitlist", tags=["waitlist"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
