"""Error taxonomy of the content API and the FastAPI handlers that render it."""

import logging
from typing import Any, Dict, Optional

import pydantic
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ContentApiError(Exception):
    """Base class for failures that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        details: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        self.hint = hint
        if code is not None:
            self.code = code

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.code:
            body["code"] = self.code
        if self.details:
            body["details"] = self.details
        if self.hint:
            body["hint"] = self.hint
        return body


class ValidationError(ContentApiError):
    """Bad input: size or type limits, missing identifiers."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ContentApiError):
    status_code = status.HTTP_404_NOT_FOUND


class ServiceNotFoundError(NotFoundError):
    def __init__(self, service_id: str):
        super().__init__("Service not found", details=f"No service with id '{service_id}'")
        self.service_id = service_id


class AssetNotFoundError(NotFoundError):
    def __init__(self, file_name: str):
        super().__init__("File not found", details=file_name)
        self.file_name = file_name


class StorageWriteError(ContentApiError):
    """The service collection could not be persisted."""

    code = "STORAGE_WRITE_FAILED"

    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"Failed to write service data to {path}", details=str(cause))
        self.path = path


class StorageReadError(ContentApiError):
    """The service document exists but its records could not be loaded."""

    code = "STORAGE_INVALID"

    def __init__(self, path: str, details: Optional[str] = None):
        super().__init__(
            f"Service data at {path} is not a valid service collection",
            details=details,
            hint="Fix the document by hand; it is left untouched until then.",
        )
        self.path = path


class BackendError(ContentApiError):
    """A media backend rejected a write or delete."""

    code = "BACKEND_ERROR"


class ReadOnlyStorageError(BackendError):
    code = "READ_ONLY_FS"

    def __init__(self, details: Optional[str] = None):
        super().__init__(
            "The filesystem is read-only; uploads cannot be stored locally.",
            details=details,
            hint="Configure a cloud storage backend (S3_ACCESS_KEY_ID / S3_SECRET_ACCESS_KEY).",
        )


class TranslationError(Exception):
    """Translating a single record failed; never fails the batch."""


class TranslatorNotConfiguredError(TranslationError):
    pass


async def handle_content_api_errors(request: Request, exc: ContentApiError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.details})")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def handle_pydantic_validation_errors(
    request: Request, exc: pydantic.ValidationError | RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    message = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in errors
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message or "Invalid request"},
    )


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that goes unhandled by a more specific exception handler."""
    try:
        return await call_next(request)
    except Exception as err:  # pylint: disable=broad-except
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(err) or "Internal server error"},
        )
