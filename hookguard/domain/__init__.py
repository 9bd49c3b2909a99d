# hookguard/domain/__init__.py

"""
Core domain components: error kinds, exceptions and entities.
"""

from hookguard.domain.exceptions import (
    ErrorCode,
    DomainException,
    ClientNotFoundException,
    ClientInactiveException,
    TokenNotFoundException,
    InvalidTokenException,
    RateLimitedException,
    StorageUnavailableException,
    InvalidCredentialsException,
    InvalidInputException,
)
from hookguard.domain.models import Client, WebhookToken, TokenUsageRecord
