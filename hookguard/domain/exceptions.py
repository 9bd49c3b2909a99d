# hookguard/domain/exceptions.py

"""
Domain exceptions for the webhook token service.

Exceptions here carry an ``internal_code`` instead of an HTTP status. The
translation to status codes happens only at the HTTP boundary
(see ``hookguard.shared.middleware.exception_middleware``).
"""

from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    CLIENT_NOT_FOUND = "CLIENT_NOT_FOUND"
    CLIENT_INACTIVE = "CLIENT_INACTIVE"
    TOKEN_NOT_FOUND = "TOKEN_NOT_FOUND"
    INVALID_TOKEN = "INVALID_TOKEN"
    RATE_LIMITED = "RATE_LIMITED"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_INPUT = "INVALID_INPUT"


class DomainException(Exception):
    """
    Base exception for every domain error.

    Attributes:
        detail: Human readable message, safe to show to the caller
        internal_code: Error kind used by the boundary to pick a status code
    """

    internal_code: ErrorCode = ErrorCode.INVALID_INPUT

    def __init__(self, detail: str, internal_code: Optional[ErrorCode] = None):
        super().__init__(detail)
        self.detail = detail
        if internal_code is not None:
            self.internal_code = internal_code


class ClientNotFoundException(DomainException):
    """Client does not exist."""

    internal_code = ErrorCode.CLIENT_NOT_FOUND

    def __init__(self, detail: str = "Client not found", client_id: Any = None):
        client_info = f" (ID: {client_id})" if client_id is not None else ""
        super().__init__(f"{detail}{client_info}")
        self.client_id = client_id


class ClientInactiveException(DomainException):
    """Client exists but has been deactivated."""

    internal_code = ErrorCode.CLIENT_INACTIVE

    def __init__(self, detail: str = "Client is inactive", client_id: Any = None):
        client_info = f" (ID: {client_id})" if client_id is not None else ""
        super().__init__(f"{detail}{client_info}")
        self.client_id = client_id


class TokenNotFoundException(DomainException):
    """Token id does not exist."""

    internal_code = ErrorCode.TOKEN_NOT_FOUND

    def __init__(self, detail: str = "Token not found", token_id: Any = None):
        token_info = f" (ID: {token_id})" if token_id is not None else ""
        super().__init__(f"{detail}{token_info}")
        self.token_id = token_id


# Single message for every invalid-token sub-reason (unknown, expired,
# revoked, inactive client).
INVALID_TOKEN_DETAIL = "Invalid or expired webhook token"


class InvalidTokenException(DomainException):
    """Presented secret does not resolve to a valid token."""

    internal_code = ErrorCode.INVALID_TOKEN

    def __init__(self):
        super().__init__(INVALID_TOKEN_DETAIL)


class RateLimitedException(DomainException):
    """Token exceeded its request budget for the current window."""

    internal_code = ErrorCode.RATE_LIMITED

    def __init__(self, retry_after: int, detail: str = "Rate limit exceeded"):
        super().__init__(detail)
        self.retry_after = retry_after


class StorageUnavailableException(DomainException):
    """Persistence layer failed or timed out. Safe to retry."""

    internal_code = ErrorCode.STORAGE_UNAVAILABLE

    def __init__(self, detail: str = "Storage temporarily unavailable",
                 original_error: Optional[BaseException] = None):
        super().__init__(detail)
        self.original_error = original_error


class InvalidCredentialsException(DomainException):
    """Administrative credentials rejected."""

    internal_code = ErrorCode.INVALID_CREDENTIALS

    def __init__(self, detail: str = "Invalid administrative credentials"):
        super().__init__(detail)


class InvalidInputException(DomainException):
    """Input data rejected."""

    internal_code = ErrorCode.INVALID_INPUT

    def __init__(self, detail: str = "Invalid input data"):
        super().__init__(detail)
