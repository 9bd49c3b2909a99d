# hookguard/application/ports/inbound.py

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Optional, Tuple
from uuid import UUID

from hookguard.domain.models.webhook_token_domain_model import WebhookToken


class IWebhookTokenUseCase(ABC):
    """Interface for webhook token lifecycle use cases."""

    @abstractmethod
    async def generate_token(
            self, client_id: UUID, expiration: Optional[timedelta] = None
    ) -> Tuple[str, WebhookToken]:
        """Issue a token for an active client. Returns (plaintext secret, record)."""
        pass

    @abstractmethod
    async def validate_token(self, presented_secret: Optional[str]) -> Tuple[bool, Optional[WebhookToken]]:
        """Check a presented secret. Returns (valid, record or None)."""
        pass

    @abstractmethod
    async def revoke_token(self, token_id: UUID) -> WebhookToken:
        """Revoke a token by ID."""
        pass

    @abstractmethod
    async def refresh_token(
            self, presented_secret: Optional[str], new_expiration: Optional[timedelta] = None
    ) -> Tuple[str, WebhookToken]:
        """Revoke a valid token and issue its replacement."""
        pass

    @abstractmethod
    async def log_usage(
            self,
            token_id: UUID,
            ip_address: Optional[str],
            endpoint_path: str,
            is_successful: bool,
            error_message: Optional[str] = None,
    ) -> bool:
        """Append a usage record. Never raises."""
        pass
