"""
Result Convention
=================

Every application operation returns either ``Ok(value)`` or ``Err(ServiceError)``
instead of raising. Business-rule violations are returned explicitly by the
operation; infrastructure failures are converted at the service boundary.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar, Union

T = TypeVar("T")


class ErrorCode(str, Enum):
    """Stable error codes shared by the service layer and the HTTP layer."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    PERMISSION_REQUIRED = "PERMISSION_REQUIRED"
    CANNOT_MODIFY_SELF = "CANNOT_MODIFY_SELF"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    FETCH_FAILED = "FETCH_FAILED"
    QUERY_FAILED = "QUERY_FAILED"
    TRANSACTION_FAILED = "TRANSACTION_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass(frozen=True)
class ServiceError:
    """
    Structured error value.

    ``message`` is safe to show to a caller. ``cause`` is kept for logs only
    and never serialized.
    """
    code: ErrorCode
    message: str
    cause: Optional[BaseException] = None

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class UnwrapError(Exception):
    """Raised when unwrap() is called on the wrong variant."""


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> ServiceError:
        raise UnwrapError(f"Called unwrap_err on Ok({self.value!r})")


@dataclass(frozen=True)
class Err:
    error: ServiceError

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Any:
        raise UnwrapError(f"Called unwrap on Err({self.error})")

    def unwrap_err(self) -> ServiceError:
        return self.error


Result = Union[Ok[T], Err]


def err(code: ErrorCode, message: str, cause: Optional[BaseException] = None) -> Err:
    """Shorthand for ``Err(ServiceError(code, message, cause))``."""
    return Err(ServiceError(code=code, message=message, cause=cause))


def validation_error(message: str) -> Err:
    return err(ErrorCode.VALIDATION_ERROR, message)


def not_found(entity: str, entity_id: Optional[str] = None) -> Err:
    if entity_id:
        return err(ErrorCode.NOT_FOUND, f"{entity} '{entity_id}' not found")
    return err(ErrorCode.NOT_FOUND, f"{entity} not found")


def conflict(message: str) -> Err:
    return err(ErrorCode.CONFLICT, message)


def permission_required(message: str = "Permission required") -> Err:
    return err(ErrorCode.PERMISSION_REQUIRED, message)
