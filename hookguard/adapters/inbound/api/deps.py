# hookguard/adapters/inbound/api/deps.py (async version)

"""
Dependencies for injection into API endpoints.

This module defines functions that provide dependencies via
FastAPI Depends() for administrative authentication, the application
services and the webhook identity resolved by the auth middleware.
"""

import hmac
import logging
from typing import Optional

from fastapi import Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from hookguard.adapters.configuration.config import settings
from hookguard.application.use_cases.client_use_cases import AsyncClientService
from hookguard.application.use_cases.webhook_token_use_cases import AsyncWebhookTokenService
from hookguard.domain.exceptions import InvalidCredentialsException, InvalidTokenException
from hookguard.domain.models.webhook_token_domain_model import WebhookToken

# Configure logger
logger = logging.getLogger(__name__)

# Bearer scheme for administrative endpoints; missing credentials are handled below
bearer_scheme = HTTPBearer(auto_error=False)


########################################################################
# Services
########################################################################

def get_token_service(request: Request) -> AsyncWebhookTokenService:
    return request.app.state.token_service


def get_client_service(request: Request) -> AsyncClientService:
    return request.app.state.client_service


########################################################################
# Administrative Authentication
########################################################################

async def require_admin(
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
) -> None:
    """
    Verify the administrative API key sent as a bearer token.

    Raises:
        InvalidCredentialsException: If the key is missing or wrong
    """
    presented = credentials.credentials if credentials else ""
    if not presented or not hmac.compare_digest(presented.encode(), settings.ADMIN_API_KEY.encode()):
        client_host = request.client.host if request.client else "N/A"
        logger.warning(f"Rejected administrative request | Path: {request.url.path} | Client: {client_host}")
        raise InvalidCredentialsException()


########################################################################
# Webhook Identity
########################################################################

async def get_current_webhook_token(request: Request) -> WebhookToken:
    """
    Token attached by AsyncWebhookAuthMiddleware.

    Raises:
        InvalidTokenException: If the route is reached without passing the middleware
    """
    token = getattr(request.state, "webhook_token", None)
    if token is None:
        logger.error(f"Webhook route {request.url.path} reached without an authenticated token")
        raise InvalidTokenException()
    return token
