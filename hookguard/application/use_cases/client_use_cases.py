# hookguard/application/use_cases/client_use_cases.py

"""
Service for client management.

Clients are owned outside the token core; this service gives operators a
way to register them, flip their active flag and inspect their tokens.
"""

import logging
import uuid
from datetime import datetime
from typing import Callable, List
from uuid import UUID

from hookguard.application.ports.outbound import ITokenStore
from hookguard.domain.exceptions import ClientNotFoundException, InvalidInputException
from hookguard.domain.models.client_domain_model import Client
from hookguard.domain.models.webhook_token_domain_model import WebhookToken
from hookguard.shared.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)


class AsyncClientService:
    """
    Service for client management.
    """

    def __init__(self, store: ITokenStore, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.clock = clock

    async def create_client(self, name: str) -> Client:
        name = name.strip()
        if not name:
            raise InvalidInputException(detail="Client name must not be empty")

        now = self.clock()
        client = await self.store.insert_client(
            Client(client_id=uuid.uuid4(), name=name, is_active=True, created_at=now, updated_at=now)
        )
        logger.info(f"Client created: {client.client_id} ({client.name})")
        return client

    async def get_client(self, client_id: UUID) -> Client:
        client = await self.store.get_client(client_id)
        if client is None:
            logger.warning(f"Client not found: ID {client_id}")
            raise ClientNotFoundException(client_id=client_id)
        return client

    async def set_client_active(self, client_id: UUID, is_active: bool) -> Client:
        """
        Activate or deactivate a client.

        Deactivation makes every token of the client fail validation without
        touching the tokens themselves.
        """
        client = await self.get_client(client_id)
        if client.is_active == is_active:
            return client

        client.is_active = is_active
        client.updated_at = self.clock()
        client = await self.store.update_client(client)
        logger.info(f"Client {client_id} {'activated' if is_active else 'deactivated'}")
        return client

    async def list_client_tokens(self, client_id: UUID) -> List[WebhookToken]:
        await self.get_client(client_id)
        return await self.store.list_client_tokens(client_id)
