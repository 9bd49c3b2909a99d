# hookguard/adapters/inbound/api/v1/endpoints/client_endpoint.py

"""
Administrative endpoints for clients.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Path, status
from fastapi_pagination import Page, Params, paginate

from hookguard.adapters.inbound.api.deps import get_client_service, require_admin
from hookguard.application.dtos.client_dto import ClientCreate, ClientOutput, ClientUpdate
from hookguard.application.dtos.webhook_token_dto import TokenOutput
from hookguard.application.use_cases.client_use_cases import AsyncClientService
from hookguard.shared.utils.pagination import pagination_params

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


@router.post(
    "",
    response_model=ClientOutput,
    status_code=status.HTTP_201_CREATED,
    summary="Register a client",
)
async def create_client(
        payload: ClientCreate,
        service: AsyncClientService = Depends(get_client_service),
):
    return await service.create_client(payload.name)


@router.get("/{client_id}", response_model=ClientOutput, summary="Get a client")
async def get_client(
        client_id: UUID = Path(..., description="Client identifier"),
        service: AsyncClientService = Depends(get_client_service),
):
    return await service.get_client(client_id)


@router.patch(
    "/{client_id}",
    response_model=ClientOutput,
    summary="Activate or deactivate a client",
    description="An inactive client keeps its tokens, but none of them validates.",
)
async def update_client(
        payload: ClientUpdate,
        client_id: UUID = Path(..., description="Client identifier"),
        service: AsyncClientService = Depends(get_client_service),
):
    return await service.set_client_active(client_id, payload.is_active)


@router.get(
    "/{client_id}/tokens",
    response_model=Page[TokenOutput],
    summary="List a client's tokens",
    description="Token metadata, newest first. Hashes and secrets are never returned.",
)
async def list_client_tokens(
        client_id: UUID = Path(..., description="Client identifier"),
        params: Params = Depends(pagination_params),
        service: AsyncClientService = Depends(get_client_service),
):
    tokens = await service.list_client_tokens(client_id)
    return paginate([TokenOutput.model_validate(token) for token in tokens], params)
