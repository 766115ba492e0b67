"""
Error taxonomy shared by every service, plus the FastAPI handlers that turn
any failure into the standard response envelope.
"""
import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.config.settings import Settings
from shared.responses import error_envelope

logger = structlog.get_logger(__name__)


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"

    def __init__(self, message: str | None = None, cause: str | None = None):
        self.message = message or self.default_message
        self.cause = cause
        super().__init__(self.message)


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict with current state"


class ServiceUnavailableError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Service temporarily unavailable"


class InternalError(AppError):
    default_message = "Server error"


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts)


def register_error_handlers(app: FastAPI, settings: Settings, internal_message: str = "Server error"):
    """Install envelope-rendering handlers. Causes are hidden in production."""

    def render(exc: AppError) -> JSONResponse:
        cause = None if settings.is_production else exc.cause
        return JSONResponse(
            status_code=exc.status_code,
            content=error_envelope(exc.message, cause),
        )

    async def app_error_handler(request: Request, exc: AppError):
        logger.warning(
            "request_failed",
            path=request.url.path,
            error_type=type(exc).__name__,
            message=exc.message,
            cause=exc.cause,
        )
        return render(exc)

    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return render(ValidationError(cause=_format_validation_errors(exc)))

    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("unhandled_error", path=request.url.path)
        return render(InternalError(internal_message, cause=str(exc)))

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
