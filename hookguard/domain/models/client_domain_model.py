# hookguard/domain/models/client_domain_model.py

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass
class Client:
    """Domain model for a webhook client (owner of tokens)."""
    client_id: UUID
    name: str
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
