"""Centralized error handling for the API.

This module provides standardized error codes, exception-to-response mapping,
and a global exception handler for FastAPI. Every error body carries an
``error`` message string alongside the machine-readable ``error_code``.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Type

import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_405_METHOD_NOT_ALLOWED,
    HTTP_409_CONFLICT,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from vidshelf.core.logging import get_request_id
from vidshelf.core.metrics import MetricsCollector
from vidshelf.providers.exceptions import (
    InvalidVideoIdError,
    MalformedProviderResponseError,
    ProviderError,
    ProviderUnconfiguredError,
    QuotaExceededError,
    VideoNotFoundError,
)
from vidshelf.services.collection import DuplicateVideoError, IndexOutOfRangeError
from vidshelf.services.extractor import InvalidInputError
from vidshelf.services.library import (
    AddInProgressError,
    SubtitleNotFoundError,
    UnsupportedSubtitleError,
)
from vidshelf.services.slots import StorageError

logger = structlog.get_logger(__name__)


class ErrorCode:
    """Standardized error codes for API responses."""

    # Client Errors (4xx)
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_VIDEO_ID = "INVALID_VIDEO_ID"
    INVALID_REQUEST = "INVALID_REQUEST"
    UNSUPPORTED_SUBTITLE = "UNSUPPORTED_SUBTITLE"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    VIDEO_NOT_FOUND = "VIDEO_NOT_FOUND"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    SUBTITLE_NOT_FOUND = "SUBTITLE_NOT_FOUND"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    DUPLICATE_VIDEO = "DUPLICATE_VIDEO"
    ADD_IN_PROGRESS = "ADD_IN_PROGRESS"
    MALFORMED_PROVIDER_RESPONSE = "MALFORMED_PROVIDER_RESPONSE"

    # Server Errors (5xx)
    PROVIDER_UNCONFIGURED = "PROVIDER_UNCONFIGURED"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# Error code to HTTP status code mapping
ERROR_CODE_TO_STATUS: Dict[str, int] = {
    # 400 Bad Request
    ErrorCode.INVALID_INPUT: HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_VIDEO_ID: HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_REQUEST: HTTP_400_BAD_REQUEST,
    ErrorCode.UNSUPPORTED_SUBTITLE: HTTP_400_BAD_REQUEST,
    # 403 Forbidden
    ErrorCode.QUOTA_EXCEEDED: HTTP_403_FORBIDDEN,
    # 404 Not Found
    ErrorCode.VIDEO_NOT_FOUND: HTTP_404_NOT_FOUND,
    ErrorCode.INDEX_OUT_OF_RANGE: HTTP_404_NOT_FOUND,
    ErrorCode.SUBTITLE_NOT_FOUND: HTTP_404_NOT_FOUND,
    ErrorCode.NOT_FOUND: HTTP_404_NOT_FOUND,
    # 405 Method Not Allowed
    ErrorCode.METHOD_NOT_ALLOWED: HTTP_405_METHOD_NOT_ALLOWED,
    # 409 Conflict
    ErrorCode.DUPLICATE_VIDEO: HTTP_409_CONFLICT,
    ErrorCode.ADD_IN_PROGRESS: HTTP_409_CONFLICT,
    # 422 Unprocessable Entity
    ErrorCode.MALFORMED_PROVIDER_RESPONSE: HTTP_422_UNPROCESSABLE_ENTITY,
    # 500 Internal Server Error
    ErrorCode.PROVIDER_UNCONFIGURED: HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.PROVIDER_ERROR: HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.STORAGE_ERROR: HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.INTERNAL_ERROR: HTTP_500_INTERNAL_SERVER_ERROR,
}


# User-friendly suggestions for error resolution
ERROR_SUGGESTIONS: Dict[str, str] = {
    ErrorCode.INVALID_INPUT: (
        "Paste a youtube.com/watch?v=, youtu.be/ or youtube.com/embed/ URL, "
        "or an 11-character video ID"
    ),
    ErrorCode.INVALID_VIDEO_ID: "Video IDs are exactly 11 characters of A-Z, a-z, 0-9, _ or -",
    ErrorCode.INVALID_REQUEST: "Check the request parameters and body",
    ErrorCode.UNSUPPORTED_SUBTITLE: "Upload a .srt, .vtt, .ass or .txt subtitle file",
    ErrorCode.QUOTA_EXCEEDED: "The YouTube API quota is exhausted or the key is invalid",
    ErrorCode.VIDEO_NOT_FOUND: "The video may be private, deleted or the ID may be mistyped",
    ErrorCode.INDEX_OUT_OF_RANGE: "Reload the collection and retry with a listed index",
    ErrorCode.SUBTITLE_NOT_FOUND: "Upload a subtitle for this video first",
    ErrorCode.NOT_FOUND: "Check the request path",
    ErrorCode.METHOD_NOT_ALLOWED: "Check the HTTP method for this endpoint",
    ErrorCode.DUPLICATE_VIDEO: "The video is already in the collection",
    ErrorCode.ADD_IN_PROGRESS: "Wait for the current video to finish loading",
    ErrorCode.MALFORMED_PROVIDER_RESPONSE: "The provider returned incomplete video details",
    ErrorCode.PROVIDER_UNCONFIGURED: "Set APP_YOUTUBE_API_KEY on the server",
    ErrorCode.PROVIDER_ERROR: "An error occurred with the video provider. Try again later",
    ErrorCode.STORAGE_ERROR: "The collection could not be saved. Check the slot file path",
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred",
}


# Exception type to error code mapping
# Order matters: subclasses must come before their base classes
EXCEPTION_TO_ERROR_CODE: Dict[Type[Exception], str] = {
    InvalidInputError: ErrorCode.INVALID_INPUT,
    InvalidVideoIdError: ErrorCode.INVALID_VIDEO_ID,
    UnsupportedSubtitleError: ErrorCode.UNSUPPORTED_SUBTITLE,
    DuplicateVideoError: ErrorCode.DUPLICATE_VIDEO,
    AddInProgressError: ErrorCode.ADD_IN_PROGRESS,
    IndexOutOfRangeError: ErrorCode.INDEX_OUT_OF_RANGE,
    SubtitleNotFoundError: ErrorCode.SUBTITLE_NOT_FOUND,
    ProviderUnconfiguredError: ErrorCode.PROVIDER_UNCONFIGURED,
    QuotaExceededError: ErrorCode.QUOTA_EXCEEDED,
    VideoNotFoundError: ErrorCode.VIDEO_NOT_FOUND,
    MalformedProviderResponseError: ErrorCode.MALFORMED_PROVIDER_RESPONSE,
    StorageError: ErrorCode.STORAGE_ERROR,
    # ProviderError must be last (after its subclasses)
    ProviderError: ErrorCode.PROVIDER_ERROR,
}


class APIError(Exception):
    """Structured API error that can be converted to an error response."""

    def __init__(
        self,
        error_code: str,
        message: str,
        details: Optional[str] = None,
        suggestion: Optional[str] = None,
    ):
        """Initialize an API error.

        Args:
            error_code: Machine-readable error code from ErrorCode class.
            message: Human-readable error message.
            details: Optional additional details about the error.
            suggestion: Optional suggestion for resolution. If not provided,
                        the default suggestion for the error code is used.
        """
        self.error_code = error_code
        self.message = message
        self.details = details
        self.suggestion = suggestion or ERROR_SUGGESTIONS.get(error_code)
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return ERROR_CODE_TO_STATUS.get(self.error_code, HTTP_500_INTERNAL_SERVER_ERROR)


def map_exception_to_api_error(exc: Exception) -> APIError:
    """Map provider and service exceptions to APIError.

    Args:
        exc: The exception to map.

    Returns:
        An APIError with the appropriate error code and message.
    """
    for exc_type, error_code in EXCEPTION_TO_ERROR_CODE.items():
        if isinstance(exc, exc_type):
            return APIError(error_code, str(exc))
    return APIError(ErrorCode.INTERNAL_ERROR, "An unexpected error occurred")


def build_error_response(
    error_code: str,
    message: str,
    details: Optional[str] = None,
    suggestion: Optional[str] = None,
) -> Dict[str, Any]:
    """Build a standardized error response dictionary.

    Args:
        error_code: Machine-readable error code.
        message: Human-readable error message.
        details: Optional additional details.
        suggestion: Optional suggestion for resolution.

    Returns:
        Dictionary matching the ErrorDetail schema.
    """
    request_id = get_request_id()
    timestamp = datetime.now(timezone.utc).isoformat()

    response: Dict[str, Any] = {
        "error": message,
        "error_code": error_code,
        "timestamp": timestamp,
    }

    if details:
        response["details"] = details
    if request_id:
        response["request_id"] = request_id
    if suggestion:
        response["suggestion"] = suggestion

    return response


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for FastAPI.

    Converts all exceptions to standardized error responses with consistent
    structure, proper HTTP status codes, and request tracing.
    """
    if isinstance(exc, APIError):
        api_error = exc
        logger.warning(
            "api_error",
            error_code=exc.error_code,
            message=exc.message,
            path=request.url.path,
        )

    elif isinstance(exc, HTTPException):
        status_code = exc.status_code

        if isinstance(exc.detail, dict) and "error_code" in exc.detail:
            error_code = exc.detail["error_code"]
            message = exc.detail.get("message", str(exc.detail))
            details = exc.detail.get("details")
        else:
            error_code = _status_to_error_code(status_code)
            message = str(exc.detail) if exc.detail else "An error occurred"
            details = None

        logger.warning(
            "http_exception",
            status_code=status_code,
            error_code=error_code,
            path=request.url.path,
        )
        MetricsCollector.record_error(error_code, request.url.path)
        return JSONResponse(
            status_code=status_code,
            content=build_error_response(
                error_code=error_code,
                message=message,
                details=details,
                suggestion=ERROR_SUGGESTIONS.get(error_code),
            ),
            headers=getattr(exc, "headers", None),
        )

    elif isinstance(exc, RequestValidationError):
        api_error = APIError(
            ErrorCode.INVALID_REQUEST,
            "Invalid request",
            details="; ".join(
                f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
                for err in exc.errors()
            ),
        )
        logger.warning("request_validation_failed", path=request.url.path)

    elif isinstance(exc, tuple(EXCEPTION_TO_ERROR_CODE)):
        api_error = map_exception_to_api_error(exc)
        logger.warning(
            "service_error",
            error_code=api_error.error_code,
            error_type=type(exc).__name__,
            message=str(exc),
            path=request.url.path,
        )

    else:
        # Unexpected error - log with full traceback
        api_error = APIError(ErrorCode.INTERNAL_ERROR, "An unexpected error occurred")
        logger.error(
            "unhandled_exception",
            error_type=type(exc).__name__,
            error=str(exc),
            path=request.url.path,
            exc_info=True,
        )

    MetricsCollector.record_error(api_error.error_code, request.url.path)
    return JSONResponse(
        status_code=api_error.status_code,
        content=build_error_response(
            error_code=api_error.error_code,
            message=api_error.message,
            details=api_error.details,
            suggestion=api_error.suggestion,
        ),
    )


def _status_to_error_code(status_code: int) -> str:
    """Infer error code from HTTP status code."""
    if status_code == HTTP_400_BAD_REQUEST:
        return ErrorCode.INVALID_REQUEST
    elif status_code == HTTP_403_FORBIDDEN:
        return ErrorCode.QUOTA_EXCEEDED
    elif status_code == HTTP_404_NOT_FOUND:
        return ErrorCode.NOT_FOUND
    elif status_code == HTTP_405_METHOD_NOT_ALLOWED:
        return ErrorCode.METHOD_NOT_ALLOWED
    elif status_code == HTTP_409_CONFLICT:
        return ErrorCode.DUPLICATE_VIDEO
    else:
        return ErrorCode.INTERNAL_ERROR
