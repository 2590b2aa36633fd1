"""Input shape checks for the admin user handlers.

Every ``validate_*`` coroutine returns the parsed DTO or raises
``InputValidationError`` with a field -> messages mapping.
"""
from typing import Any

from pydantic import BaseModel, ValidationError

from cms_admin.core.errors import InputValidationError
from cms_admin.schemas.admin_user import (
    AdminUserCreate,
    AdminUsersDelete,
    AdminUserUpdate,
    RegistrationLinkRequest,
)
from cms_admin.services.ports import UserStore


def _parse(schema: type[BaseModel], payload: Any) -> Any:
    try:
        return schema.model_validate(payload if payload is not None else {})
    except ValidationError as exc:
        raise InputValidationError.from_pydantic(exc) from exc


class AdminUserValidator:
    def __init__(self, store: UserStore) -> None:
        self.store = store

    async def _check_roles(self, role_ids: list[int] | None) -> None:
        if role_ids and not await self.store.roles_exist(role_ids):
            raise InputValidationError({"roles": ["Some of the provided roles do not exist"]})

    async def validate_create(self, payload: Any) -> AdminUserCreate:
        data = _parse(AdminUserCreate, payload)
        await self._check_roles(data.roles)
        return data

    async def validate_update(self, payload: Any) -> AdminUserUpdate:
        data = _parse(AdminUserUpdate, payload)
        await self._check_roles(data.roles)
        return data

    async def validate_delete_many(self, payload: Any) -> AdminUsersDelete:
        return _parse(AdminUsersDelete, payload)

    async def validate_registration_link(self, payload: Any) -> RegistrationLinkRequest:
        return _parse(RegistrationLinkRequest, payload)
