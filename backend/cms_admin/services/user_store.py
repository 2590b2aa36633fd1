"""SQLAlchemy-backed admin user store.

One store instance wraps one ``AsyncSession`` (one request). Every write
commits its own transaction; the unique index on ``admin_users.email`` is the
final guard against concurrent duplicates.
"""
import logging
import math
import secrets
import uuid
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from cms_admin.core.config import Settings, settings as default_settings
from cms_admin.models.admin_user import SUPER_ADMIN_ROLE_ID, AdminRole, AdminUser
from cms_admin.schemas.admin_user import Pagination, SanitizedUser
from cms_admin.services.ports import Page

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "firstname": AdminUser.firstname,
    "lastname": AdminUser.lastname,
    "email": AdminUser.email,
    "username": AdminUser.username,
    "createdAt": AdminUser.created_at,
    "created_at": AdminUser.created_at,
    "updatedAt": AdminUser.updated_at,
    "updated_at": AdminUser.updated_at,
}

# Columns a caller may set through create/update
WRITABLE_FIELDS = ("firstname", "lastname", "username", "email", "is_active", "countries")


def _to_uuid(value: Any) -> uuid.UUID | None:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def _positive_int(raw: Any, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def generate_registration_token() -> str:
    return secrets.token_hex(20)


class AdminUserStore:
    def __init__(self, db: AsyncSession, settings: Settings = default_settings) -> None:
        self.db = db
        self.settings = settings

    # ─── Lookups ───

    async def exists(self, *, email: str, exclude_id: Any | None = None) -> bool:
        stmt = select(func.count()).select_from(AdminUser).where(AdminUser.email == email)
        if exclude_id is not None:
            excluded = _to_uuid(exclude_id)
            if excluded is not None:
                stmt = stmt.where(AdminUser.id != excluded)
        return (await self.db.execute(stmt)).scalar_one() > 0

    async def roles_exist(self, role_ids: Sequence[int]) -> bool:
        wanted = set(role_ids)
        stmt = select(func.count()).select_from(AdminRole).where(AdminRole.id.in_(wanted))
        return (await self.db.execute(stmt)).scalar_one() == len(wanted)

    async def find_one(self, *, id: Any | None = None, email: str | None = None) -> AdminUser | None:
        stmt = select(AdminUser)
        if id is not None:
            user_id = _to_uuid(id)
            if user_id is None:
                return None
            stmt = stmt.where(AdminUser.id == user_id)
        if email is not None:
            stmt = stmt.where(AdminUser.email == email)
        if id is None and email is None:
            return None
        return (await self.db.execute(stmt)).scalars().first()

    # ─── Listing ───

    async def find_page(self, query: Mapping[str, Any]) -> Page:
        return await self._page(query, search=None)

    async def search_page(self, query: Mapping[str, Any]) -> Page:
        term = str(query.get("_q") or "").strip()
        return await self._page(query, search=term or None)

    async def _page(self, query: Mapping[str, Any], search: str | None) -> Page:
        page = _positive_int(query.get("page"), 1)
        page_size = min(
            _positive_int(query.get("pageSize"), self.settings.ADMIN_USERS_DEFAULT_PAGE_SIZE),
            self.settings.ADMIN_USERS_MAX_PAGE_SIZE,
        )

        stmt = select(AdminUser)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    AdminUser.firstname.ilike(pattern),
                    AdminUser.lastname.ilike(pattern),
                    AdminUser.email.ilike(pattern),
                    AdminUser.username.ilike(pattern),
                )
            )

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = (await self.db.execute(count_stmt)).scalar_one()

        offset = (page - 1) * page_size
        stmt = stmt.order_by(*self._order_by(query.get("_sort"))).offset(offset).limit(page_size)
        users = (await self.db.execute(stmt)).scalars().all()

        pagination = Pagination(
            page=page,
            page_size=page_size,
            page_count=math.ceil(total / page_size) if total else 0,
            total=total,
        )
        return Page(results=list(users), pagination=pagination.model_dump(by_alias=True))

    @staticmethod
    def _order_by(sort: Any) -> list:
        field, _, direction = str(sort or "").partition(":")
        column = SORTABLE_FIELDS.get(field.strip())
        if column is None:
            return [AdminUser.created_at.desc(), AdminUser.id]
        if direction.strip().upper() == "DESC":
            return [column.desc(), AdminUser.id]
        return [column.asc(), AdminUser.id]

    # ─── Writes ───

    async def _roles_by_ids(self, role_ids: Sequence[int]) -> list[AdminRole]:
        result = await self.db.execute(
            select(AdminRole).where(AdminRole.id.in_(set(role_ids))).order_by(AdminRole.id)
        )
        return list(result.scalars().all())

    async def create(self, attrs: Mapping[str, Any]) -> AdminUser:
        fields = {key: attrs[key] for key in WRITABLE_FIELDS if key in attrs}
        # inactive until the registration link has been used
        fields.update(registration_token=generate_registration_token(), is_active=False)
        user = AdminUser(**fields)
        user.roles = await self._roles_by_ids(attrs.get("roles", []))
        self.db.add(user)
        await self.db.commit()
        logger.info("Created admin user %s", user.id)
        return user

    async def update_by_id(self, user_id: Any, attrs: Mapping[str, Any]) -> AdminUser | None:
        user = await self.find_one(id=user_id)
        if user is None:
            return None

        for key in WRITABLE_FIELDS:
            if key in attrs:
                setattr(user, key, attrs[key])
        if "roles" in attrs:
            user.roles = await self._roles_by_ids(attrs["roles"])
        if any(role.id == SUPER_ADMIN_ROLE_ID for role in user.roles):
            user.countries = []

        await self.db.commit()
        logger.info("Updated admin user %s fields=%s", user.id, sorted(attrs))
        return user

    async def delete_by_id(self, user_id: Any) -> AdminUser | None:
        user = await self.find_one(id=user_id)
        if user is None:
            return None
        await self.db.delete(user)
        await self.db.commit()
        logger.info("Deleted admin user %s", user.id)
        return user

    async def delete_by_ids(self, user_ids: Sequence[Any]) -> list[AdminUser]:
        ids = [uid for uid in (_to_uuid(raw) for raw in user_ids) if uid is not None]
        if not ids:
            return []
        result = await self.db.execute(select(AdminUser).where(AdminUser.id.in_(ids)))
        users = list(result.scalars().all())
        for user in users:
            await self.db.delete(user)
        await self.db.commit()
        logger.info("Deleted %d of %d requested admin users", len(users), len(user_ids))
        return users

    # ─── Output ───

    def sanitize(self, user: AdminUser) -> dict[str, Any]:
        return SanitizedUser.model_validate(user).model_dump(mode="json", by_alias=True)
