"""FastAPI exception handlers: every failure leaves as an error envelope."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError

from delivery.api.responses import failure
from delivery.shared.errors import DeliveryError, ErrorKind, normalize
from delivery.utils.logging import get_logger

logger = get_logger(__name__)

_HANDLED = (
    DeliveryError,
    ValidationError,
    ObjectNotFoundError,
    ExpectedVersionError,
    RequestValidationError,
    Exception,
)


async def handle_error(request: Request, exc: Exception):
    error = normalize(exc)
    if error.kind != ErrorKind.INTERNAL:
        logger.info(
            "request_rejected",
            path=request.url.path,
            method=request.method,
            error_code=error.code,
            status_code=error.kind.status_code,
        )
    return failure(error)


def install_error_handlers(app: FastAPI) -> None:
    for exc_class in _HANDLED:
        app.add_exception_handler(exc_class, handle_error)
