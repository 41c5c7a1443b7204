"""Error taxonomy and the JSON envelope handlers that render it."""
import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger(__name__)

# Largest value an integer primary key column can hold
MAX_ID = 2**63 - 1


class AppError(Exception):
    """Base class for errors that map onto an HTTP status."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed input."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized, no token"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(AppError):
    """Duplicate membership or duplicate rack entry."""
    status_code = status.HTTP_409_CONFLICT
    default_message = "Already exists"


class StoreFailure(AppError):
    """Transaction abort or connection failure in the database layer."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"


def parse_id(value: str, label: str) -> int:
    """Parse a path id, treating anything malformed as an absent record."""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise NotFound(f"{label} not found")
    if parsed < 1 or parsed > MAX_ID:
        raise NotFound(f"{label} not found")
    return parsed


def _envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error as {success: false, message}."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("request_error", path=request.url.path, error=exc.message)
        else:
            logger.info("request_rejected", path=request.url.path, status_code=exc.status_code, error=exc.message)
        return _envelope(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{field}: {first.get('msg')}" if field else first.get("msg")
        else:
            message = "Invalid request"
        return _envelope(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _envelope(exc.status_code, str(exc.detail))

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("store_failure", path=request.url.path, error=str(exc))
        return _envelope(StoreFailure.status_code, StoreFailure.default_message)
