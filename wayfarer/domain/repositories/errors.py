"""
Repository Errors
=================

The single exception type repository implementations raise. The service
boundary converts it into an ``Err`` value.
"""
from typing import Optional

from wayfarer.domain.result import ErrorCode


class RepositoryError(Exception):
    """
    Raised by repository ports.

    ``code`` is NOT_FOUND for writes against a missing id, CONFLICT for
    uniqueness violations and QUERY_FAILED for infrastructure failures.
    """

    def __init__(self, code: ErrorCode, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.cause = cause

    @classmethod
    def not_found(cls, entity: str, entity_id: str) -> "RepositoryError":
        return cls(ErrorCode.NOT_FOUND, f"{entity} '{entity_id}' not found")

    @classmethod
    def conflict(cls, message: str) -> "RepositoryError":
        return cls(ErrorCode.CONFLICT, message)

    @classmethod
    def query_failed(cls, message: str, cause: Optional[BaseException] = None) -> "RepositoryError":
        return cls(ErrorCode.QUERY_FAILED, message, cause)

    @property
    def is_infrastructure_failure(self) -> bool:
        return self.code not in (ErrorCode.NOT_FOUND, ErrorCode.CONFLICT)
