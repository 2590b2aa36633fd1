"""Admin user management endpoints."""
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request, Response
from fastapi.responses import JSONResponse

from cms_admin.core.deps import get_admin_user_api
from cms_admin.services.admin_users import AdminUserAPI, HandlerResult

router = APIRouter()

AdminUsers = Annotated[AdminUserAPI, Depends(get_admin_user_api)]
# Raw JSON body: shape errors are reported by the validator as 400, not FastAPI's 422
RawBody = Annotated[Any, Body()]


def to_response(result: HandlerResult) -> Response:
    if result.body is None:
        return Response(status_code=204)
    return JSONResponse(status_code=result.status_code, content=result.body)


# ─── POST /admin/users ───

@router.post("/users", status_code=201, summary="Create an admin user")
async def create_user(api: AdminUsers, payload: RawBody = None):
    return to_response(await api.create(payload))


# ─── GET /admin/users ───

@router.get("/users", summary="List or search admin users")
async def find_users(request: Request, api: AdminUsers):
    return to_response(await api.find(dict(request.query_params)))


# ─── POST /admin/users/registration-link ───

@router.post("/users/registration-link", summary="Email a registration link to an admin user")
async def send_registration_link(api: AdminUsers, payload: RawBody = None):
    return to_response(await api.send_registration_link(payload))


# ─── POST /admin/users/batch-delete ───

@router.post("/users/batch-delete", summary="Delete several admin users")
async def delete_users(api: AdminUsers, payload: RawBody = None):
    return to_response(await api.delete_many(payload))


# ─── GET /admin/users/{id} ───

@router.get("/users/{user_id}", summary="Get one admin user")
async def find_user(user_id: str, api: AdminUsers):
    return to_response(await api.find_one(user_id))


# ─── PUT /admin/users/{id} ───

@router.put("/users/{user_id}", summary="Update an admin user")
async def update_user(user_id: str, api: AdminUsers, payload: RawBody = None):
    return to_response(await api.update(user_id, payload))


# ─── DELETE /admin/users/{id} ───

@router.delete("/users/{user_id}", summary="Delete an admin user")
async def delete_user(user_id: str, api: AdminUsers):
    return to_response(await api.delete_one(user_id))
