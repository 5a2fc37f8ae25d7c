"""
Error taxonomy and the global HTTP error handler.

Route handlers and dependencies raise; the handlers registered here are the
only place errors are turned into responses.
"""
import enum
import logging
import traceback
from typing import Any, Optional, Tuple

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from authservice.base_service import ApiJSONResponse, ApiResponse
from authservice.config import Settings

logger = logging.getLogger(__name__)

UNIQUE_CONSTRAINT_MARKER = "Unique constraint"
RECORD_NOT_FOUND_MARKER = "Record to update not found"


class ErrorKind(str, enum.Enum):
    OPERATIONAL = "operational"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"


class ApiError(Exception):
    """
    An anticipated error with a defined HTTP status.

    Args:
        status_code: HTTP status to respond with
        message: Client-facing message
        details: Optional structured payload returned as ``error``
    """
    kind = ErrorKind.OPERATIONAL

    def __init__(self, status_code: int, message: str, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.is_operational = True
        self.details = details


class StoreError(Exception):
    """
    Failure reported by the user store collaborator.

    ``kind`` tells the error handler how to map it; ``fields`` names the
    columns involved in a constraint violation.
    """
    def __init__(self, kind: ErrorKind, message: str, fields: Tuple[str, ...] = ()):
        super().__init__(message)
        self.kind = kind
        self.fields = tuple(fields)


def classify_error(error: BaseException) -> ErrorKind:
    """
    Resolve the kind of an error.

    An explicit ``kind`` attribute wins. Untyped errors fall back to the
    message markers persistence layers put in their exception text; that
    match is wording dependent.
    """
    kind = getattr(error, "kind", None)
    if isinstance(kind, ErrorKind):
        return kind
    message = str(error)
    if UNIQUE_CONSTRAINT_MARKER in message:
        return ErrorKind.CONFLICT
    if RECORD_NOT_FOUND_MARKER in message:
        return ErrorKind.NOT_FOUND
    return ErrorKind.UNKNOWN


def _mentions_email(error: BaseException) -> bool:
    if "email" in getattr(error, "fields", ()):
        return True
    return "email" in str(error)


def _format_stack(error: BaseException) -> str:
    return "".join(traceback.format_exception(type(error), error, error.__traceback__))


def build_error_response(error: BaseException, settings: Settings) -> Tuple[int, ApiResponse]:
    """
    Map any error to an HTTP status and response envelope.

    Decision order: explicit ApiError, conflict, not found, then 500. In
    development the raw error is logged and its stack trace is added to the
    ``error`` field.
    """
    status_code = 500
    message = "Internal server error"
    details: Optional[Any] = None

    kind = classify_error(error)
    if isinstance(error, ApiError):
        status_code = error.status_code
        message = error.message
        details = error.details or None
    elif kind is ErrorKind.CONFLICT:
        status_code = 409
        message = "Resource already exists"
        if _mentions_email(error):
            message = "Email address is already registered"
    elif kind is ErrorKind.NOT_FOUND:
        status_code = 404
        message = "Resource not found"

    response = ApiResponse(success=False, message=message, error=details)

    if settings.is_development:
        logger.error("Error: %r", error, exc_info=(type(error), error, error.__traceback__))
        stack = _format_stack(error)
        if isinstance(details, dict):
            response.error = {**details, "stack": stack}
        elif details is not None:
            response.error = {"details": details, "stack": stack}
        else:
            response.error = {"stack": stack}

    return status_code, response


def global_error_handler(settings: Settings):
    """Create the Starlette exception handler bound to ``settings``."""
    async def handle(request: Request, exc: Exception) -> ApiJSONResponse:
        if isinstance(exc, StarletteHTTPException):
            exc = _from_http_exception(request, exc)
        status_code, response = build_error_response(exc, settings)
        return ApiJSONResponse(
            success=False,
            message=response.message,
            error=response.error,
            status_code=status_code,
        )

    return handle


def not_found_handler(request: Request) -> ApiError:
    """Error for a request that matched no route."""
    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"
    return ApiError(404, f"Route {url} not found")


def _from_http_exception(request: Request, exc: StarletteHTTPException) -> ApiError:
    if exc.status_code == 404 and exc.detail == "Not Found":
        return not_found_handler(request)
    return ApiError(exc.status_code, str(exc.detail))


def register_error_handlers(app: FastAPI, settings: Settings) -> None:
    """
    Install the global handler for API errors, framework HTTP errors and
    anything else raised while serving a request.
    """
    handler = global_error_handler(settings)
    app.add_exception_handler(ApiError, handler)
    app.add_exception_handler(StarletteHTTPException, handler)

    @app.middleware("http")
    async def catch_unhandled(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return await handler(request, exc)
