"""Seed default data into the database."""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cms_admin.models.admin_user import SUPER_ADMIN_ROLE_ID, AdminRole

logger = logging.getLogger(__name__)

# Default admin roles: (id, name, code, description)
DEFAULT_ROLES = [
    (SUPER_ADMIN_ROLE_ID, "Super Admin", "super-admin", "Super Admins can access and manage all features and settings."),
    (2, "Editor", "editor", "Editors can manage and publish contents including those of other users."),
    (3, "Author", "author", "Authors can manage the content they have created."),
]


async def seed_admin_roles(db: AsyncSession) -> None:
    """Insert the default roles that are missing (matched by code)."""
    for role_id, name, code, description in DEFAULT_ROLES:
        existing = await db.execute(select(AdminRole).where(AdminRole.code == code))
        if existing.scalars().first() is None:
            db.add(AdminRole(id=role_id, name=name, code=code, description=description))
            logger.info("Seeded admin role: %s (%s)", name, role_id)
    await db.commit()
