# hookguard/shared/middleware/exception_middleware.py (async version)

"""
Middleware for centralized exception handling.

This module defines middleware that intercepts exceptions and formats
appropriate error responses for the caller. It is the only place where
domain error kinds are translated to HTTP status codes.
"""

import time
import logging
from typing import Callable, Dict

from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

from hookguard.domain.exceptions import DomainException, ErrorCode, RateLimitedException
from hookguard.adapters.configuration.config import settings

# Configure logger
logger = logging.getLogger(__name__)

STATUS_BY_CODE: Dict[ErrorCode, int] = {
    ErrorCode.CLIENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CLIENT_INACTIVE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.TOKEN_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_TOKEN: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorCode.STORAGE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
}

STORAGE_UNAVAILABLE_DETAIL = "Storage temporarily unavailable"


def domain_error_response(exc: DomainException) -> JSONResponse:
    """Build the HTTP response for a domain exception."""
    status_code = STATUS_BY_CODE.get(exc.internal_code, status.HTTP_400_BAD_REQUEST)
    headers = {}
    if isinstance(exc, RateLimitedException):
        headers["Retry-After"] = str(exc.retry_after)
    elif exc.internal_code == ErrorCode.STORAGE_UNAVAILABLE:
        headers["Retry-After"] = "1"
    elif exc.internal_code in (ErrorCode.INVALID_TOKEN, ErrorCode.INVALID_CREDENTIALS):
        headers["WWW-Authenticate"] = "Bearer"

    detail = exc.detail
    if exc.internal_code == ErrorCode.STORAGE_UNAVAILABLE:
        # Backend specifics stay in the logs
        detail = STORAGE_UNAVAILABLE_DETAIL

    content = {"detail": detail, "code": exc.internal_code.value}
    if isinstance(exc, RateLimitedException):
        content["retry_after"] = exc.retry_after

    return JSONResponse(status_code=status_code, content=content, headers=headers)


class AsyncExceptionMiddleware(BaseHTTPMiddleware):
    """
    Middleware for centralized exception handling.
    Captures specific exceptions and formats the response accordingly.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.time()
        client_host = request.client.host if request.client else "N/A"
        try:
            response = await call_next(request)
            process_time = time.time() - start_time
            response.headers["X-Process-Time"] = str(process_time)
            return response

        except DomainException as exc:
            logger.warning(
                f"Domain exception: {exc.detail} | Code: {exc.internal_code.value} | "
                f"Path: {request.url.path}"
            )
            return domain_error_response(exc)

        except SQLAlchemyError as exc:
            # Errors escaping a store adapter untranslated
            logger.error(
                f"Database error: Type={type(exc).__name__} | "
                f"Path: {request.url.path} | Client: {client_host}"
            )
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={
                    "detail": STORAGE_UNAVAILABLE_DETAIL,
                    "code": ErrorCode.STORAGE_UNAVAILABLE.value
                },
                headers={"Retry-After": "1"}
            )

        except Exception as exc:
            # Unhandled exceptions
            if settings.ENVIRONMENT == "production":
                error_message = "Internal server error"
                logger.exception(
                    f"Unhandled exception: Type={type(exc).__name__} | "
                    f"Path: {request.url.path} | Client: {client_host}"
                )
            else:
                error_message = str(exc)
                logger.exception(
                    f"Unhandled exception: {str(exc)} | "
                    f"Path: {request.url.path} | Client: {client_host}"
                )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "detail": error_message,
                    "code": "INTERNAL_SERVER_ERROR"
                }
            )
