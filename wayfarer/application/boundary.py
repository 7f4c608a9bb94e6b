"""
Service Boundary
================

Decorator applied to every exported application operation so that it returns a
Result instead of raising.
"""
import functools
import logging
from typing import Any, Awaitable, Callable, Mapping, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from wayfarer.domain.repositories.errors import RepositoryError
from wayfarer.domain.result import ErrorCode, Result, err

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Result[Any]]])
M = TypeVar("M", bound=BaseModel)

Input = Union[BaseModel, Mapping[str, Any]]


def parse_input(model: Type[M], data: Union[M, Mapping[str, Any]]) -> M:
    """Accept a DTO instance or a plain mapping. Invalid mappings raise ValidationError."""
    if isinstance(data, model):
        return data
    return model.model_validate(data)


def format_validation_error(exc: ValidationError) -> str:
    """First pydantic error as "field: message"."""
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "Invalid input")
    return f"{location}: {message}" if location else message


def service_boundary(usecase: str, failure_code: ErrorCode = ErrorCode.FETCH_FAILED) -> Callable[[F], F]:
    """
    Convert exceptions escaping an operation into ``Err`` values.

    Args:
        usecase: Short description used in messages, e.g. "search regions"
        failure_code: Code for repository infrastructure failures
            (FETCH_FAILED for reads, QUERY_FAILED for writes)

    Returns:
        Decorator for an async operation returning a Result
    """
    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Result[Any]:
            try:
                return await func(*args, **kwargs)
            except ValidationError as exc:
                return err(ErrorCode.VALIDATION_ERROR, format_validation_error(exc), exc)
            except RepositoryError as exc:
                if exc.is_infrastructure_failure:
                    logger.error(f"Failed to {usecase}: {exc.message}", exc_info=True)
                    return err(failure_code, f"Failed to {usecase}", exc)
                return err(exc.code, exc.message, exc)
            except Exception as exc:
                logger.error(f"Unexpected error while trying to {usecase}: {exc}", exc_info=True)
                return err(ErrorCode.INTERNAL_ERROR, f"Unexpected error while trying to {usecase}", exc)

        return wrapper  # type: ignore[return-value]

    return decorator
