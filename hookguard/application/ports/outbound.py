# hookguard/application/ports/outbound.py

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from hookguard.domain.models.client_domain_model import Client
from hookguard.domain.models.webhook_token_domain_model import WebhookToken
from hookguard.domain.models.token_usage_domain_model import TokenUsageRecord


class ITokenStore(ABC):
    """
    Persistence port for clients, tokens and usage records.

    Implementations must be atomic per record and raise
    StorageUnavailableException for any backend failure or timeout.
    """

    @abstractmethod
    async def find_active_client(self, client_id: UUID) -> Optional[Client]:
        """Get client by ID only if it is active."""
        pass

    @abstractmethod
    async def get_client(self, client_id: UUID) -> Optional[Client]:
        """Get client by ID regardless of its active flag."""
        pass

    @abstractmethod
    async def insert_client(self, client: Client) -> Client:
        """Persist a new client."""
        pass

    @abstractmethod
    async def update_client(self, client: Client) -> Client:
        """Persist client changes (active flag, timestamps)."""
        pass

    @abstractmethod
    async def insert_token(self, token: WebhookToken) -> WebhookToken:
        """Persist a newly issued token."""
        pass

    @abstractmethod
    async def get_token(self, token_id: UUID) -> Optional[WebhookToken]:
        """Get token by ID."""
        pass

    @abstractmethod
    async def find_token_by_hash(self, token_hash: str) -> Optional[Tuple[WebhookToken, Client]]:
        """Get token and its owning client by secret hash."""
        pass

    @abstractmethod
    async def update_token(self, token: WebhookToken) -> WebhookToken:
        """Overwrite a token record."""
        pass

    @abstractmethod
    async def mark_token_revoked(self, token_id: UUID, revoked_at: datetime) -> bool:
        """
        Set the revoked flag if it is not set yet.

        Returns True only for the call that flipped the flag.
        """
        pass

    @abstractmethod
    async def list_client_tokens(self, client_id: UUID) -> List[WebhookToken]:
        """List a client's tokens, newest first."""
        pass

    @abstractmethod
    async def insert_usage_record(self, record: TokenUsageRecord) -> TokenUsageRecord:
        """Append a usage record."""
        pass

    @abstractmethod
    async def list_usage_records(self, token_id: UUID) -> List[TokenUsageRecord]:
        """List usage records of a token, oldest first."""
        pass
