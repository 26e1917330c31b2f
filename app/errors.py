"""
Error taxonomy shared by all procedures.

Services raise ``fastapi.HTTPException``; the handlers registered in ``main``
attach a typed procedure code to every error response and translate database
failures into the same shape.
"""

import logging
from typing import Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

logger = logging.getLogger(__name__)


class ErrorCodes:
    """Typed procedure error codes returned to clients"""

    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    BAD_REQUEST = "BAD_REQUEST"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class ErrorCategory:
    """Client-facing error categories (drive toast messages)"""

    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    DATABASE = "database"
    NETWORK = "network"
    UNKNOWN = "unknown"


USER_FRIENDLY_MESSAGES = {
    ErrorCategory.UNAUTHORIZED: "Please sign in to continue",
    ErrorCategory.FORBIDDEN: "You do not have permission to perform this action",
    ErrorCategory.NOT_FOUND: "The requested resource was not found",
    ErrorCategory.VALIDATION: "Please check your input and try again",
    ErrorCategory.DATABASE: "A database error occurred. Please try again later",
    ErrorCategory.NETWORK: "Network error. Please check your connection and try again",
    ErrorCategory.UNKNOWN: "An unexpected error occurred. Please try again later",
}


def code_for_status(status_code: int) -> str:
    """Map an HTTP status code to a procedure error code"""
    if status_code == 401:
        return ErrorCodes.UNAUTHORIZED
    if status_code == 403:
        return ErrorCodes.FORBIDDEN
    if status_code == 404:
        return ErrorCodes.NOT_FOUND
    if 400 <= status_code < 500:
        return ErrorCodes.BAD_REQUEST
    return ErrorCodes.INTERNAL_SERVER_ERROR


def category_for_status(status_code: int) -> str:
    """Map an HTTP status code to a client-facing error category"""
    if status_code == 0:
        return ErrorCategory.NETWORK
    if status_code == 401:
        return ErrorCategory.UNAUTHORIZED
    if status_code == 403:
        return ErrorCategory.FORBIDDEN
    if status_code == 404:
        return ErrorCategory.NOT_FOUND
    if status_code in (400, 409, 422):
        return ErrorCategory.VALIDATION
    if status_code in (502, 503, 504):
        return ErrorCategory.NETWORK
    return ErrorCategory.UNKNOWN


def classify_exception(exc: Exception) -> tuple[str, int, str]:
    """
    Classify any exception into (category, status_code, message).

    HTTPExceptions keep their status and detail; database errors are
    reported without leaking driver messages.
    """
    if isinstance(exc, HTTPException):
        detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        return category_for_status(exc.status_code), exc.status_code, detail
    if isinstance(exc, IntegrityError):
        return (
            ErrorCategory.VALIDATION,
            409,
            "A record with this information already exists",
        )
    if isinstance(exc, OperationalError):
        return ErrorCategory.DATABASE, 503, USER_FRIENDLY_MESSAGES[ErrorCategory.DATABASE]
    if isinstance(exc, SQLAlchemyError):
        return ErrorCategory.DATABASE, 500, USER_FRIENDLY_MESSAGES[ErrorCategory.DATABASE]
    return ErrorCategory.UNKNOWN, 500, USER_FRIENDLY_MESSAGES[ErrorCategory.UNKNOWN]


def user_friendly_message(category: Optional[str]) -> str:
    return USER_FRIENDLY_MESSAGES.get(category or "", USER_FRIENDLY_MESSAGES[ErrorCategory.UNKNOWN])


def error_response(
    status_code: int, detail, headers: Optional[dict] = None, category: Optional[str] = None
) -> JSONResponse:
    """Render the standard error body: detail, code and category"""
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": detail,
            "code": code_for_status(status_code),
            "category": category or category_for_status(status_code),
        },
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    if exc.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path} - {exc.status_code}: {exc.detail}")
    return error_response(exc.status_code, exc.detail, headers=getattr(exc, "headers", None))


async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    category, status_code, message = classify_exception(exc)
    logger.error(f"❌ Database error on {request.method} {request.url.path}: {exc}")
    return error_response(status_code, message, category=category)
