"""
Custom exception classes and error handling for API Bridge.

Service-layer validation failures raise these exceptions; the handlers
registered here turn them into consistent JSON error responses.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from loguru import logger
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""
    detail: str
    error_code: str | None = None


class APIException(Exception):
    """Base exception for API errors."""

    def __init__(
        self,
        detail: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str | None = None
    ):
        self.detail = detail
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(detail)


class ApiNotFoundError(APIException):
    """Exception raised when no API configuration has the given name."""

    def __init__(self, name: str):
        super().__init__(
            detail=f"API configuration '{name}' not found",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="API_NOT_FOUND"
        )
        self.name = name


class DocumentNotFoundError(APIException):
    """Exception raised when a search document id cannot be resolved."""

    def __init__(self, document_id: str):
        super().__init__(
            detail=f"Document '{document_id}' not found",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="DOCUMENT_NOT_FOUND"
        )
        self.document_id = document_id


class AlreadyExistsError(APIException):
    """Exception raised when saving a configuration under a taken name."""

    def __init__(self, name: str):
        super().__init__(
            detail=f"API configuration '{name}' already exists",
            status_code=status.HTTP_409_CONFLICT,
            error_code="ALREADY_EXISTS"
        )
        self.name = name


class InvalidUrlError(APIException):
    """Exception raised when a base URL is not an absolute http(s) URL."""

    def __init__(self, url: str):
        super().__init__(
            detail=f"Invalid base URL '{url}': expected an absolute http or https URL",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="INVALID_URL"
        )
        self.url = url


class IncompleteAuthError(APIException):
    """Exception raised when an auth scheme is missing required credentials."""

    def __init__(self, auth_type: str, missing: list[str]):
        super().__init__(
            detail=f"Auth type '{auth_type}' requires: {', '.join(missing)}",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="INCOMPLETE_AUTH"
        )
        self.auth_type = auth_type
        self.missing = missing


class DependencyMissingError(Exception):
    """Raised when an optional runtime component cannot be imported."""

    def __init__(self, dependency: str, message: str):
        self.dependency = dependency
        super().__init__(message)


async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Handler for custom API exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code}
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    errors = exc.errors()
    # Format validation errors into a readable message
    error_messages = []
    for error in errors:
        loc = " -> ".join(str(part) for part in error["loc"])
        msg = error["msg"]
        error_messages.append(f"{loc}: {msg}")

    detail = "; ".join(error_messages) if error_messages else "Validation error"

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": detail, "error_code": "VALIDATION_ERROR"}
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception("Unhandled error on {} {}", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "error_code": "INTERNAL_ERROR"}
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application."""
    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
