# hookguard/application/use_cases/__init__.py

"""
Application service module.

This package contains the application services that implement the business logic
of the application, organized according to functional domains.
"""

from hookguard.application.use_cases.client_use_cases import AsyncClientService
from hookguard.application.use_cases.webhook_token_use_cases import AsyncWebhookTokenService

__all__ = [
    "AsyncClientService",
    "AsyncWebhookTokenService",
]
