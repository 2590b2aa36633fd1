"""Shared fakes for the admin user tests.

``InMemoryUserStore`` and ``RecordingEmailSender`` stand in for the database
store and the mail transport so handler tests run without infrastructure.
"""
import math
import secrets
import uuid
from datetime import datetime, timezone

import pytest

from cms_admin.core.config import Settings
from cms_admin.core.errors import EmailDispatchError
from cms_admin.schemas.admin_user import SanitizedUser
from cms_admin.services.admin_users import AdminUserAPI
from cms_admin.services.ports import Page
from cms_admin.validation.admin_user import AdminUserValidator


class FakeRole:
    def __init__(self, role_id: int, name: str, code: str):
        self.id = role_id
        self.name = name
        self.code = code
        self.description = None


ROLES = {
    1: FakeRole(1, "Super Admin", "super-admin"),
    2: FakeRole(2, "Editor", "editor"),
    3: FakeRole(3, "Author", "author"),
}


class FakeAdminUser:
    """Minimal admin user record, including the secrets the API must hide."""

    def __init__(self, **attrs):
        now = datetime.now(timezone.utc)
        self.id = attrs.get("id") or uuid.uuid4()
        self.firstname = attrs["firstname"]
        self.lastname = attrs["lastname"]
        self.username = attrs.get("username")
        self.email = attrs["email"]
        self.password = attrs.get("password", "$2b$10$hashed")
        self.reset_password_token = attrs.get("reset_password_token", "reset-secret")
        self.registration_token = attrs.get("registration_token") or secrets.token_hex(20)
        self.is_active = attrs.get("is_active", False)
        self.blocked = False
        self.roles = [ROLES[r] for r in attrs.get("roles", [])]
        self.countries = list(attrs.get("countries", []))
        self.created_at = now
        self.updated_at = now


class InMemoryUserStore:
    def __init__(self, users=None):
        self.users = {user.id: user for user in users or []}
        self.created = []

    @staticmethod
    def _key(user_id):
        try:
            return uuid.UUID(str(user_id))
        except ValueError:
            return None

    async def exists(self, *, email, exclude_id=None):
        excluded = self._key(exclude_id) if exclude_id is not None else None
        return any(u.email == email and u.id != excluded for u in self.users.values())

    async def roles_exist(self, role_ids):
        return all(r in ROLES for r in role_ids)

    async def create(self, attrs):
        user = FakeAdminUser(**attrs)
        self.users[user.id] = user
        self.created.append(user)
        return user

    async def find_one(self, *, id=None, email=None):
        if id is not None:
            return self.users.get(self._key(id))
        return next((u for u in self.users.values() if u.email == email), None)

    def _page(self, users, query):
        page = int(query.get("page", 1))
        page_size = int(query.get("pageSize", 10))
        start = (page - 1) * page_size
        return Page(
            results=users[start:start + page_size],
            pagination={
                "page": page,
                "pageSize": page_size,
                "pageCount": math.ceil(len(users) / page_size),
                "total": len(users),
            },
        )

    async def find_page(self, query):
        return self._page(list(self.users.values()), query)

    async def search_page(self, query):
        term = query.get("_q", "").lower()
        matches = [
            u for u in self.users.values()
            if term in f"{u.firstname} {u.lastname} {u.email}".lower()
        ]
        return self._page(matches, query)

    async def update_by_id(self, user_id, attrs):
        user = self.users.get(self._key(user_id))
        if user is None:
            return None
        for key, value in attrs.items():
            if key == "roles":
                user.roles = [ROLES[r] for r in value]
            else:
                setattr(user, key, value)
        return user

    async def delete_by_id(self, user_id):
        return self.users.pop(self._key(user_id), None)

    async def delete_by_ids(self, user_ids):
        deleted = [self.users.pop(self._key(uid), None) for uid in user_ids]
        return [user for user in deleted if user is not None]

    def sanitize(self, user):
        return SanitizedUser.model_validate(user).model_dump(mode="json", by_alias=True)


class RecordingEmailSender:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    async def send_templated_email(self, addresses, template_id, data):
        if self.fail:
            raise EmailDispatchError("SMTP delivery failed: connection refused")
        self.sent.append((dict(addresses), template_id, data))


def make_user(email="jane@example.com", roles=(2,), countries=("FR", "DE"), **attrs) -> FakeAdminUser:
    return FakeAdminUser(
        firstname=attrs.pop("firstname", "Jane"),
        lastname=attrs.pop("lastname", "Doe"),
        email=email,
        roles=list(roles),
        countries=list(countries),
        **attrs,
    )


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        REGISTER_ADMIN_FROM="cms@example.com",
        REGISTER_ADMIN_REPLY_TO="help@example.com",
        REGISTER_ADMIN_EMAIL_TEMPLATE="register-admin",
    )


@pytest.fixture
def store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def mailer() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def api(store, mailer, test_settings) -> AdminUserAPI:
    return AdminUserAPI(
        validator=AdminUserValidator(store),
        store=store,
        email_sender=mailer,
        settings=test_settings,
    )
