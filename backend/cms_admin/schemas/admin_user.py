"""Pydantic schemas for admin user management."""
import uuid
from datetime import datetime

from pydantic import AliasGenerator, BaseModel, ConfigDict, EmailStr, Field, PositiveInt, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Output model: built from attributes by field name, dumped as camelCase."""
    model_config = ConfigDict(alias_generator=AliasGenerator(serialization_alias=to_camel))


class _InputModel(BaseModel):
    """Request body: camelCase keys (snake_case accepted), unknown keys rejected."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    @field_validator("email", mode="after", check_fields=False)
    @classmethod
    def lowercase_email(cls, value: str | None) -> str | None:
        return value.lower() if value is not None else None


# ─── Inputs ───

class AdminUserCreate(_InputModel):
    """Create a new admin user. Registration completes through the emailed link."""
    firstname: str = Field(min_length=1)
    lastname: str = Field(min_length=1)
    email: EmailStr
    roles: list[PositiveInt] = Field(min_length=1)
    countries: list[str] = Field(default_factory=list)


class AdminUserUpdate(_InputModel):
    """Partial update; only the fields sent are replaced."""
    firstname: str | None = Field(default=None, min_length=1)
    lastname: str | None = Field(default=None, min_length=1)
    username: str | None = None
    email: EmailStr | None = None
    is_active: bool | None = None
    roles: list[PositiveInt] | None = Field(default=None, min_length=1)
    countries: list[str] | None = None

    @field_validator("firstname", "lastname", "email", "is_active", "roles", "countries", mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class AdminUsersDelete(_InputModel):
    ids: list[uuid.UUID] = Field(min_length=1)


class RegistrationLinkRequest(_InputModel):
    email: EmailStr
    link: str = Field(min_length=1)


# ─── Outputs ───

class RoleOut(_CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    code: str
    description: str | None = None


class SanitizedUser(_CamelModel):
    """Admin user as exposed by the API. Secrets are not part of this allow-list."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    firstname: str
    lastname: str
    username: str | None = None
    email: str
    is_active: bool
    blocked: bool
    roles: list[RoleOut]
    countries: list[str]
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Pagination(_CamelModel):
    page: int
    page_size: int
    page_count: int
    total: int
