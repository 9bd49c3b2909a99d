# hookguard/application/dtos/webhook_token_dto.py

"""
Schemas for webhook token operations.

Token outputs never include the stored hash. The plaintext secret only
appears in ``IssuedTokenOutput``, returned once at generation or refresh.
"""

from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class TokenGenerateInput(BaseModel):
    client_id: UUID = Field(..., description="Client that will own the token")
    expires_in_days: Optional[int] = Field(
        None, gt=0, le=3650, description="Token lifetime in days; the configured default when omitted"
    )

    def expiration(self) -> Optional[timedelta]:
        return timedelta(days=self.expires_in_days) if self.expires_in_days else None


class TokenRefreshInput(BaseModel):
    expires_in_days: Optional[int] = Field(
        None, gt=0, le=3650, description="Lifetime of the new token in days"
    )

    def expiration(self) -> Optional[timedelta]:
        return timedelta(days=self.expires_in_days) if self.expires_in_days else None


class TokenRevokeInput(BaseModel):
    token_id: UUID = Field(..., description="Token to revoke")


class IssuedTokenOutput(BaseModel):
    token_id: UUID
    token: str = Field(..., description="Plaintext secret. Shown only once.")
    expires_at: datetime


class TokenOutput(BaseModel):
    """Token metadata, safe to list."""
    token_id: UUID
    client_id: UUID
    expires_at: datetime
    is_revoked: bool
    revoked_at: Optional[datetime] = None
    created_at: datetime
    last_used_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MessageOutput(BaseModel):
    message: str


class WebhookReceivedOutput(BaseModel):
    message: str
    token_id: UUID
    client_id: UUID
