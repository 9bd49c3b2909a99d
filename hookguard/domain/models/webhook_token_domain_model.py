# hookguard/domain/models/webhook_token_domain_model.py

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass
class WebhookToken:
    """
    Domain model for an issued webhook token.

    Only the salted hash of the secret is kept; the plaintext secret
    never reaches this object.
    """
    token_id: UUID
    client_id: UUID
    token_hash: str
    expires_at: datetime
    created_at: datetime
    is_revoked: bool = False
    revoked_at: Optional[datetime] = None
    last_used_at: Optional[datetime] = None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
