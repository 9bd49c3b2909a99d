# hookguard/adapters/inbound/api/v1/endpoints/webhook_token_endpoint.py

"""
Endpoints for the webhook token lifecycle.

Generation and revocation require the administrative key. Refresh is
authorized by the token being refreshed, sent in the webhook token header.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Header

from hookguard.adapters.configuration.config import settings
from hookguard.adapters.inbound.api.deps import get_token_service, require_admin
from hookguard.application.dtos.webhook_token_dto import (
    IssuedTokenOutput,
    MessageOutput,
    TokenGenerateInput,
    TokenRefreshInput,
    TokenRevokeInput,
)
from hookguard.application.use_cases.webhook_token_use_cases import AsyncWebhookTokenService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/generate",
    response_model=IssuedTokenOutput,
    dependencies=[Depends(require_admin)],
    summary="Generate a webhook token",
    description="Issues a token for an active client. The plaintext token is returned only in this response.",
)
async def generate_token(
        payload: TokenGenerateInput,
        service: AsyncWebhookTokenService = Depends(get_token_service),
):
    secret, token = await service.generate_token(payload.client_id, payload.expiration())
    return IssuedTokenOutput(token_id=token.token_id, token=secret, expires_at=token.expires_at)


@router.post(
    "/refresh",
    response_model=IssuedTokenOutput,
    summary="Refresh a webhook token",
    description="Revokes the presented token and issues a new one for the same client.",
)
async def refresh_token(
        payload: Optional[TokenRefreshInput] = Body(None),
        current_token: Optional[str] = Header(None, alias=settings.WEBHOOK_TOKEN_HEADER),
        service: AsyncWebhookTokenService = Depends(get_token_service),
):
    expiration = payload.expiration() if payload else None
    secret, token = await service.refresh_token(current_token, expiration)
    return IssuedTokenOutput(token_id=token.token_id, token=secret, expires_at=token.expires_at)


@router.post(
    "/revoke",
    response_model=MessageOutput,
    dependencies=[Depends(require_admin)],
    summary="Revoke a webhook token",
)
async def revoke_token(
        payload: TokenRevokeInput,
        service: AsyncWebhookTokenService = Depends(get_token_service),
):
    await service.revoke_token(payload.token_id)
    return MessageOutput(message="Token revoked successfully")
