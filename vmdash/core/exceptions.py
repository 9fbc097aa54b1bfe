import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: object = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)


class DatabaseNotConfiguredError(AppException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "CONFIGURATION_ERROR"

    def __init__(self) -> None:
        super().__init__(
            "Database is not configured",
            details="DATABASE_URL environment variable is not set",
        )


class MissingFieldsError(AppException):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "MISSING_FIELDS"

    def __init__(self, missing: list[str], required: tuple[str, ...]) -> None:
        super().__init__(
            f"Missing required fields: {', '.join(to_camel(f) for f in required)}",
            details={"missing": missing},
        )


class VMNotFoundError(AppException):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "VM_NOT_FOUND"

    def __init__(self, vm_id: str) -> None:
        super().__init__("VM not found", details={"id": vm_id})


class DatastoreError(AppException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "DATASTORE_ERROR"

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(f"Failed to {operation}", details=reason)


def _error_response(
    status_code: int, code: str, message: str, details: object = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": message,
            "code": code,
            "details": details,
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        log_fn = logger.error if exc.status_code >= 500 else logger.warning
        log_fn(
            exc.error_code,
            extra={
                "error_code": exc.error_code,
                "status_code": exc.status_code,
                "path": request.url.path,
                "detail": exc.message,
            },
        )
        return _error_response(exc.status_code, exc.error_code, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Plain dicts only; pydantic error contexts may hold non-serializable values
        errors = [
            {
                "loc": list(e.get("loc", [])),
                "msg": e.get("msg", ""),
                "type": e.get("type", ""),
            }
            for e in exc.errors()
        ]
        logger.info(
            "Request validation failed",
            extra={"path": request.url.path, "error_count": len(errors)},
        )
        return _error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "VALIDATION_ERROR",
            "Request validation failed",
            errors,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled exception",
            exc_info=True,
            extra={"path": request.url.path, "exc_type": type(exc).__name__},
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "INTERNAL_ERROR",
            "An unexpected error occurred",
        )
