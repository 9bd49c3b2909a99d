# hookguard/adapters/outbound/persistence/models/webhook_token_model.py

"""
Webhook token model.

Only the salted hash of the secret is stored. The hash is unique and
indexed because validation looks tokens up by it.
"""

import uuid

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from hookguard.adapters.outbound.persistence.models.base_model import Base


class WebhookToken(Base):
    """
    Attributes:
        token_id: Unique identifier of the token
        client_id: Owning client
        token_hash: Base64 SHA-512 digest of secret + salt
        expires_at: Expiration instant (UTC)
        is_revoked: Revocation flag, terminal once set
        revoked_at: When the revocation was persisted
        created_at: Issue instant (UTC)
        last_used_at: Last successful validation (UTC)
    """
    __tablename__ = "webhook_tokens"

    token_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id = Column(
        Uuid,
        ForeignKey("clients.client_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token_hash = Column(String(512), nullable=False, unique=True, index=True)
    expires_at = Column(DateTime, nullable=False)
    is_revoked = Column(Boolean, default=False, nullable=False)
    revoked_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False)
    last_used_at = Column(DateTime, nullable=True)

    client = relationship("Client", back_populates="tokens")

    def __repr__(self) -> str:
        return f"<WebhookToken(token_id={self.token_id}, revoked={self.is_revoked})>"
