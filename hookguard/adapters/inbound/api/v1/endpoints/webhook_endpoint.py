# hookguard/adapters/inbound/api/v1/endpoints/webhook_endpoint.py

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends

from hookguard.adapters.inbound.api.deps import get_current_webhook_token
from hookguard.application.dtos.webhook_token_dto import WebhookReceivedOutput
from hookguard.domain.models.webhook_token_domain_model import WebhookToken

router = APIRouter()


@router.post(
    "",
    response_model=WebhookReceivedOutput,
    summary="Receive a webhook",
    description="Requires a valid token in the webhook token header.",
)
async def receive_webhook(
        payload: Optional[Any] = Body(None),
        token: WebhookToken = Depends(get_current_webhook_token),
):
    return WebhookReceivedOutput(
        message="Webhook received successfully",
        token_id=token.token_id,
        client_id=token.client_id,
    )
