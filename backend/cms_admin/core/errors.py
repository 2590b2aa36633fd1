"""Domain errors raised by the admin user handlers.

Each error carries the HTTP status it maps to; the FastAPI exception handler in
``cms_admin.main`` renders them as ``{statusCode, error, message, data}``.
"""
from typing import Any

from pydantic import ValidationError


class AdminUserError(Exception):
    status_code = 400
    error = "Bad Request"

    def __init__(self, message: str, data: Any | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.data = data

    def to_body(self) -> dict:
        return {
            "statusCode": self.status_code,
            "error": self.error,
            "message": self.message,
            "data": self.data,
        }


class InputValidationError(AdminUserError):
    """Malformed or missing input fields."""

    def __init__(self, errors: dict[str, list[str]]) -> None:
        super().__init__("ValidationError", errors)
        self.errors = errors

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> "InputValidationError":
        errors: dict[str, list[str]] = {}
        for err in exc.errors():
            path = ".".join(str(part) for part in err["loc"]) or "body"
            errors.setdefault(path, []).append(err["msg"])
        return cls(errors)


class DuplicateEmailError(AdminUserError):
    pass


class UserNotFoundError(AdminUserError):
    status_code = 404
    error = "Not Found"


class EmailDispatchError(Exception):
    """Templated email could not be rendered or delivered."""
