"""Success/error result types returned by every registry operation."""

from enum import Enum
from typing import Generic, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Error vocabulary of the registry.

    ``ALREADY_EXISTS``, ``INVALID_RECIPIENT`` and ``ADMIN_ONLY`` are kept
    for interface compatibility. No operation currently produces them
    (``ALREADY_EXISTS`` only on a corrupted id counter).
    """

    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    INVALID_TITLE = "invalid_title"
    INVALID_SIZE = "invalid_size"
    INVALID_CATEGORIES = "invalid_categories"
    UNAUTHORIZED = "unauthorized"
    ACCESS_DENIED = "access_denied"
    INVALID_RECIPIENT = "invalid_recipient"
    ADMIN_ONLY = "admin_only"


ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.NOT_FOUND: "No ebook is registered under this id",
    ErrorKind.ALREADY_EXISTS: "An ebook is already registered under this id",
    ErrorKind.INVALID_TITLE: "Title or summary length is out of range",
    ErrorKind.INVALID_SIZE: "File size is out of range",
    ErrorKind.INVALID_CATEGORIES: "Categories are empty, too many, or too long",
    ErrorKind.UNAUTHORIZED: "Caller is not the author of this ebook",
    ErrorKind.ACCESS_DENIED: "Caller has no access right for this ebook",
    ErrorKind.INVALID_RECIPIENT: "Recipient is not valid",
    ErrorKind.ADMIN_ONLY: "Operation is restricted to the administrator",
}


class Ok(BaseModel, Generic[T]):
    """Successful outcome carrying an optional value."""

    model_config = ConfigDict(frozen=True)

    value: Optional[T] = None

    @property
    def is_ok(self) -> bool:
        return True


class Err(BaseModel):
    """Failed outcome. No state was changed by the call."""

    model_config = ConfigDict(frozen=True)

    error: ErrorKind

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return ERROR_MESSAGES[self.error]


Result = Union[Ok[T], Err]
