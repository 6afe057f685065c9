"""Error taxonomy for the delivery domain.

Every failure that reaches a client is one of a closed set of kinds, each with
a fixed HTTP status. Domain code raises ``DeliveryError`` subclasses directly;
anything else (Protean, FastAPI, unexpected exceptions) goes through
``normalize`` exactly once, at the API boundary.
"""

from enum import Enum
from typing import Any

from fastapi.exceptions import RequestValidationError
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError

from delivery.utils.logging import get_logger

logger = get_logger(__name__)


class ErrorKind(Enum):
    NOT_FOUND = 404
    CONFLICT = 409
    FORBIDDEN = 403
    UNAUTHORIZED = 401
    INVALID = 400
    INTERNAL = 500

    @property
    def status_code(self) -> int:
        return self.value


class DeliveryError(Exception):
    """Base class for errors with a stable code and a client-safe message."""

    kind = ErrorKind.INTERNAL

    def __init__(self, code: str, message: str, details: Any = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class NotFoundError(DeliveryError):
    kind = ErrorKind.NOT_FOUND


class ConflictError(DeliveryError):
    kind = ErrorKind.CONFLICT


class ForbiddenError(DeliveryError):
    kind = ErrorKind.FORBIDDEN


class UnauthorizedError(DeliveryError):
    kind = ErrorKind.UNAUTHORIZED


class InvalidRequestError(DeliveryError):
    kind = ErrorKind.INVALID


class InternalError(DeliveryError):
    kind = ErrorKind.INTERNAL


def _field_errors(errors: list[dict]) -> list[dict]:
    return [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", ""),
        }
        for error in errors
    ]


def normalize(exc: Exception) -> DeliveryError:
    """Map any exception onto the delivery error taxonomy."""
    if isinstance(exc, DeliveryError):
        return exc

    if isinstance(exc, ExpectedVersionError):
        return ConflictError(
            "CONCURRENT_MODIFICATION",
            "The resource was modified by another request, please retry",
        )

    if isinstance(exc, ObjectNotFoundError):
        return NotFoundError("RESOURCE_NOT_FOUND", "The requested resource does not exist")

    if isinstance(exc, ValidationError):
        return InvalidRequestError("VALIDATION_ERROR", "Request validation failed", details=exc.messages)

    if isinstance(exc, RequestValidationError):
        return InvalidRequestError(
            "VALIDATION_ERROR",
            "Request validation failed",
            details=_field_errors(exc.errors()),
        )

    logger.error("unexpected_error", error_type=type(exc).__name__, exc_info=exc)
    return InternalError("INTERNAL_ERROR", "An unexpected error occurred")
