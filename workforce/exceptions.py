"""
Domain exceptions and their HTTP mapping.
"""
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from workforce.logging_config import get_logger

logger = get_logger(__name__)


class WorkforceError(Exception):
    """Base error for domain failures."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(WorkforceError):
    """Input failed a business rule."""
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(WorkforceError):
    """Row already exists or is in the wrong state."""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(WorkforceError):
    """No row with that id, or it is hidden from the caller."""
    status_code = status.HTTP_404_NOT_FOUND


class PermissionDeniedError(WorkforceError):
    """The caller's role does not allow the action."""
    status_code = status.HTTP_403_FORBIDDEN


class EmailDeliveryError(WorkforceError):
    """The email provider rejected the message or could not be reached."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class EmailNotConfiguredError(WorkforceError):
    """No Resend API key is set."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_workforce_error(request: Request, exc: WorkforceError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "detail": exc.message},
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    """Malformed or missing request fields are a 400 like any other bad input."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{location}: {first.get('msg', 'Invalid request')}" if location else first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message, "detail": message, "errors": jsonable_encoder(errors)},
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the domain error handlers to the application."""
    app.add_exception_handler(WorkforceError, handle_workforce_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
