from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cms_admin.core.config import Settings, get_settings
from cms_admin.db.session import get_session
from cms_admin.services.admin_users import AdminUserAPI
from cms_admin.services.email import TemplatedEmailSender
from cms_admin.services.user_store import AdminUserStore
from cms_admin.validation.admin_user import AdminUserValidator


async def get_admin_user_api(
    db: Annotated[AsyncSession, Depends(get_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AdminUserAPI:
    """Wire one AdminUserAPI per request around the request's DB session."""
    store = AdminUserStore(db, settings)
    return AdminUserAPI(
        validator=AdminUserValidator(store),
        store=store,
        email_sender=TemplatedEmailSender(settings),
        settings=settings,
    )
