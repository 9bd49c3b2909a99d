# hookguard/adapters/outbound/persistence/models/__init__.py

"""
Data models module.

Exports every SQLAlchemy model so that importing this package registers
all tables on ``Base.metadata``.
"""

from hookguard.adapters.outbound.persistence.models.base_model import Base
from hookguard.adapters.outbound.persistence.models.client_model import Client
from hookguard.adapters.outbound.persistence.models.webhook_token_model import WebhookToken
from hookguard.adapters.outbound.persistence.models.token_usage_model import TokenUsageLog

__all__ = [
    "Base",
    "Client",
    "WebhookToken",
    "TokenUsageLog",
]
