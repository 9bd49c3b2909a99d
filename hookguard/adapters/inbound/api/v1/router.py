# hookguard/adapters/inbound/api/v1/router.py

from fastapi import APIRouter
from hookguard.adapters.inbound.api.v1.endpoints import (
    client_endpoint,
    webhook_endpoint,
    webhook_token_endpoint,
)

api_router = APIRouter()

api_router.include_router(client_endpoint.router, prefix="/clients", tags=["Clients"])
api_router.include_router(webhook_token_endpoint.router, prefix="/tokens", tags=["Webhook Tokens"])
api_router.include_router(webhook_endpoint.router, prefix="/webhook", tags=["Webhook"])
