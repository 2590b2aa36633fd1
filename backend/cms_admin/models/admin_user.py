from sqlalchemy import JSON, Boolean, Column, ForeignKey, Integer, String, Table, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cms_admin.db.base import Base, TimestampMixin, UUIDMixin

SUPER_ADMIN_ROLE_ID = 1

admin_users_roles = Table(
    "admin_users_roles",
    Base.metadata,
    Column("user_id", Uuid(as_uuid=True), ForeignKey("admin_users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("admin_roles.id", ondelete="CASCADE"), primary_key=True),
)


class AdminRole(Base, TimestampMixin):
    __tablename__ = "admin_roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class AdminUser(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "admin_users"

    firstname: Mapped[str] = mapped_column(String(255), nullable=False)
    lastname: Mapped[str] = mapped_column(String(255), nullable=False)
    username: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    # credential material, never part of the sanitized view
    password: Mapped[str | None] = mapped_column(String(255), nullable=True)
    reset_password_token: Mapped[str | None] = mapped_column(String(255), nullable=True)
    registration_token: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    blocked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    countries: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    roles: Mapped[list[AdminRole]] = relationship(
        AdminRole,
        secondary=admin_users_roles,
        lazy="selectin",
        order_by=AdminRole.id,
    )
