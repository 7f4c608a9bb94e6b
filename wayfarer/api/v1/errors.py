"""
API Errors
==========

Maps service ``Err`` values to HTTP responses with ``{"code", "message"}``
bodies. The error cause is logged by the service layer and never returned.
"""
from typing import Callable, Dict, List, TypeVar

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from wayfarer.application.dto.common_dto import ErrorResponse, PageResponse
from wayfarer.domain.queries import Page
from wayfarer.domain.result import ErrorCode, Result, ServiceError

T = TypeVar("T")
R = TypeVar("R")

HTTP_STATUS_BY_CODE: Dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.PERMISSION_REQUIRED: status.HTTP_403_FORBIDDEN,
    ErrorCode.CANNOT_MODIFY_SELF: status.HTTP_403_FORBIDDEN,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.FETCH_FAILED: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.QUERY_FAILED: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.TRANSACTION_FAILED: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ApiError(Exception):
    """Raised by controllers for a failed service call; rendered by the handler below."""

    def __init__(self, error: ServiceError):
        super().__init__(error.message)
        self.error = error

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_CODE.get(self.error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def unwrap(result: Result[T]) -> T:
    """Return the Ok value or raise ApiError for an Err."""
    if result.is_err():
        raise ApiError(result.unwrap_err())
    return result.unwrap()


def to_page_response(page: Page[T], convert: Callable[[T], R]) -> PageResponse[R]:
    items: List[R] = [convert(item) for item in page.items]
    return PageResponse(
        items=items,
        total_count=page.total_count,
        page=page.page,
        limit=page.limit,
        total_pages=page.total_pages,
    )


def _error_body(code: ErrorCode, message: str) -> dict:
    return ErrorResponse(code=code.value, message=message).model_dump()


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.error.code, exc.error.message))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg', 'Invalid input')}" if location else first.get("msg", "Invalid input")
    else:
        message = "Invalid input"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(ErrorCode.VALIDATION_ERROR, message),
    )


def register_exception_handlers(application: FastAPI) -> None:
    application.add_exception_handler(ApiError, api_error_handler)
    application.add_exception_handler(RequestValidationError, request_validation_handler)
