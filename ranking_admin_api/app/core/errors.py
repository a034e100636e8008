"""
Error taxonomy shared by the service layer and the HTTP adapter.

Services raise one of the ``ServiceError`` subclasses below; the
application installs a single exception handler that maps the
``kind`` of the error to an HTTP status code.  Messages carried by
``StorageUnavailableError`` and ``InternalError`` are generic on
purpose and never include driver output.
"""

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    INTERNAL = "internal"


class ServiceError(Exception):
    """Base class for classified failures."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidArgumentError(ServiceError):
    """Malformed or out-of-range caller input."""

    kind = ErrorKind.INVALID_ARGUMENT


class NotFoundError(ServiceError):
    """The referenced page or record does not exist."""

    kind = ErrorKind.NOT_FOUND


class StorageUnavailableError(ServiceError):
    kind = ErrorKind.STORAGE_UNAVAILABLE

    def __init__(self, message: str = "An error occurred while accessing the database") -> None:
        super().__init__(message)


class InternalError(ServiceError):
    kind = ErrorKind.INTERNAL

    def __init__(self, message: str = "An unexpected error occurred") -> None:
        super().__init__(message)


STATUS_CODES = {
    ErrorKind.INVALID_ARGUMENT: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STORAGE_UNAVAILABLE: 503,
    ErrorKind.INTERNAL: 500,
}
