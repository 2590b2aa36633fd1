from fastapi import APIRouter

from cms_admin.api.v1 import admin_users

api_router = APIRouter()

api_router.include_router(admin_users.router, prefix="/admin", tags=["admin-users"])
