# hookguard/domain/models/__init__.py

from hookguard.domain.models.client_domain_model import Client
from hookguard.domain.models.webhook_token_domain_model import WebhookToken
from hookguard.domain.models.token_usage_domain_model import TokenUsageRecord

__all__ = ["Client", "WebhookToken", "TokenUsageRecord"]
