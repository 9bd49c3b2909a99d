# hookguard/adapters/outbound/persistence/models/client_model.py

"""
Client model.

A client is an external system authorized to call the webhook endpoints
with tokens issued to it.
"""

import uuid

from sqlalchemy import Column, String, Boolean, DateTime, Uuid
from sqlalchemy.orm import relationship

from hookguard.adapters.outbound.persistence.models.base_model import Base


class Client(Base):
    """
    Attributes:
        client_id: Unique identifier of the client
        name: Display name
        is_active: Tokens of an inactive client never validate
        created_at: Creation timestamp, set by the application
        updated_at: Last modification timestamp, set by the application
    """
    __tablename__ = "clients"

    client_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=True)

    tokens = relationship(
        "WebhookToken",
        back_populates="client",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Client(client_id={self.client_id}, active={self.is_active})>"
