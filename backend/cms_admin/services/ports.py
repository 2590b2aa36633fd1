"""Collaborator interfaces consumed by the admin user handlers."""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass
class Page:
    results: list[Any] = field(default_factory=list)
    pagination: dict[str, int] = field(default_factory=dict)


class UserStore(Protocol):
    async def exists(self, *, email: str, exclude_id: Any | None = None) -> bool:
        ...

    async def roles_exist(self, role_ids: Sequence[int]) -> bool:
        ...

    async def create(self, attrs: Mapping[str, Any]) -> Any:
        ...

    async def find_one(self, *, id: Any | None = None, email: str | None = None) -> Any | None:
        ...

    async def find_page(self, query: Mapping[str, Any]) -> Page:
        ...

    async def search_page(self, query: Mapping[str, Any]) -> Page:
        ...

    async def update_by_id(self, user_id: Any, attrs: Mapping[str, Any]) -> Any | None:
        ...

    async def delete_by_id(self, user_id: Any) -> Any | None:
        ...

    async def delete_by_ids(self, user_ids: Sequence[Any]) -> list[Any]:
        ...

    def sanitize(self, user: Any) -> dict[str, Any]:
        ...


class EmailSender(Protocol):
    async def send_templated_email(
        self,
        addresses: Mapping[str, str],
        template_id: str,
        data: Mapping[str, Any],
    ) -> None:
        """Raises EmailDispatchError when the message cannot be sent."""
        ...
