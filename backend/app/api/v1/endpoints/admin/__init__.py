"""
Admin API endpoints for the UniRate admin console.
All endpoints require an active admin.
"""
from fastapi import APIRouter

from app.api.v1.endpoints.admin import dashboard, users, reviews

admin_router = APIRouter(prefix="/admin", tags=["Admin"])

admin_router.include_router(dashboard.router, tags=["Admin Dashboard"])
admin_router.include_router(users.router, prefix="/users", tags=["Admin Users"])
admin_router.include_router(reviews.router, prefix="/reviews", tags=["Admin Reviews"])
