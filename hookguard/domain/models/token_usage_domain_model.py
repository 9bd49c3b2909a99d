# hookguard/domain/models/token_usage_domain_model.py

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass
class TokenUsageRecord:
    """Append-only audit entry for one request that passed authentication."""
    token_id: UUID
    endpoint_path: str
    is_successful: bool
    used_at: datetime
    ip_address: Optional[str] = None
    error_message: Optional[str] = None
    log_id: Optional[int] = None
