"""Admin user handlers: create, list, fetch, update, delete and registration links.

The handlers only orchestrate. Shape checks live in the validator, persistence
in the store and delivery in the email sender, all injected at construction.
Each handler returns a ``HandlerResult`` or raises an ``AdminUserError``.
"""
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from cms_admin.core.config import Settings
from cms_admin.core.errors import DuplicateEmailError, EmailDispatchError, InputValidationError, UserNotFoundError
from cms_admin.models.admin_user import SUPER_ADMIN_ROLE_ID
from cms_admin.services.ports import EmailSender, UserStore
from cms_admin.validation.admin_user import AdminUserValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HandlerResult:
    status_code: int
    body: dict[str, Any] | None = None


def is_super_admin(role_ids: Any) -> bool:
    return isinstance(role_ids, (list, tuple, set)) and SUPER_ADMIN_ROLE_ID in role_ids


def scope_countries(role_ids: Any, countries: Any) -> Any:
    """Super admins are never country-scoped: their countries are always empty."""
    return [] if is_super_admin(role_ids) else countries


class AdminUserAPI:
    def __init__(
        self,
        validator: AdminUserValidator,
        store: UserStore,
        email_sender: EmailSender,
        settings: Settings,
    ) -> None:
        self.validator = validator
        self.store = store
        self.email_sender = email_sender
        self.settings = settings

    def _with_countries(self, user: Any) -> dict[str, Any]:
        return {**self.store.sanitize(user), "countries": list(user.countries or [])}

    # ─── create ───

    async def create(self, payload: Any) -> HandlerResult:
        data = await self.validator.validate_create(payload)

        if await self.store.exists(email=data.email):
            raise DuplicateEmailError("Email already taken")

        attrs = data.model_dump(include={"firstname", "lastname", "email", "roles", "countries"})
        attrs["countries"] = scope_countries(attrs["roles"], attrs["countries"])

        created = await self.store.create(attrs)
        return HandlerResult(201, {"data": self.store.sanitize(created)})

    # ─── find ───

    async def find(self, query: Mapping[str, Any]) -> HandlerResult:
        if "_q" in query:
            page = await self.store.search_page(query)
        else:
            page = await self.store.find_page(query)

        return HandlerResult(
            200,
            {
                "data": {
                    "results": [self.store.sanitize(user) for user in page.results],
                    "pagination": page.pagination,
                }
            },
        )

    # ─── findOne ───

    async def find_one(self, user_id: Any) -> HandlerResult:
        user = await self.store.find_one(id=user_id)
        if user is None:
            raise UserNotFoundError("User does not exist")
        return HandlerResult(200, {"data": self._with_countries(user)})

    # ─── update ───

    async def update(self, user_id: Any, payload: Any) -> HandlerResult:
        if isinstance(payload, Mapping):
            payload = dict(payload)
            # roles absent: countries are left exactly as sent
            if "roles" in payload and is_super_admin(payload["roles"]):
                payload["countries"] = []

        data = await self.validator.validate_update(payload)

        if "email" in data.model_fields_set:
            if await self.store.exists(email=data.email, exclude_id=user_id):
                raise DuplicateEmailError("A user with this email address already exists")

        attrs = data.model_dump(exclude_unset=True)
        if is_super_admin(data.roles):
            attrs["countries"] = []
        elif "countries" in attrs and "roles" not in attrs:
            # countries sent alone are still scoped by the roles already stored
            current = await self.store.find_one(id=user_id)
            if current is not None and is_super_admin([role.id for role in current.roles]):
                attrs["countries"] = []

        updated = await self.store.update_by_id(user_id, attrs)
        if updated is None:
            raise UserNotFoundError("User does not exist")

        return HandlerResult(200, {"data": self._with_countries(updated)})

    # ─── deleteOne ───

    async def delete_one(self, user_id: Any) -> HandlerResult:
        deleted = await self.store.delete_by_id(user_id)
        if deleted is None:
            raise UserNotFoundError("User not found")
        return HandlerResult(200, {"data": self.store.sanitize(deleted)})

    # ─── deleteMany ───

    async def delete_many(self, payload: Any) -> HandlerResult:
        data = await self.validator.validate_delete_many(payload)
        deleted = await self.store.delete_by_ids(data.ids)
        return HandlerResult(200, {"data": [self.store.sanitize(user) for user in deleted]})

    # ─── registration link ───

    async def send_registration_link(self, payload: Any) -> HandlerResult:
        try:
            data = await self.validator.validate_registration_link(payload)
        except InputValidationError as exc:
            logger.debug("Registration link request rejected: %s", sorted(exc.data))
            return HandlerResult(204)

        user = await self.store.find_one(email=data.email)
        if user is None:
            # same outcome as a delivery failure, so callers cannot probe for accounts
            logger.debug("Registration link requested for an unknown email")
            return HandlerResult(204)

        url = data.link + (user.registration_token or "")
        try:
            await self.email_sender.send_templated_email(
                {
                    "to": user.email,
                    "from": self.settings.REGISTER_ADMIN_FROM,
                    "replyTo": self.settings.REGISTER_ADMIN_REPLY_TO,
                },
                self.settings.REGISTER_ADMIN_EMAIL_TEMPLATE,
                {
                    "url": url,
                    "user": {
                        "email": user.email,
                        "firstname": user.firstname,
                        "lastname": user.lastname,
                        "username": user.username,
                    },
                },
            )
        except EmailDispatchError as exc:
            logger.error("Registration email to user %s failed: %s", user.id, exc)
            return HandlerResult(204)

        logger.info("Registration link sent to user %s", user.id)
        return HandlerResult(200, {"message": "success"})
