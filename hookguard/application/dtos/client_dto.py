# hookguard/application/dtos/client_dto.py

"""
Schemas for client data.

Pydantic DTOs for validating and serializing the data of clients that
own webhook tokens.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ClientCreate(BaseModel):
    """Input for registering a client."""
    name: str = Field(..., min_length=1, max_length=100, description="Client display name")

    @field_validator("name")
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class ClientUpdate(BaseModel):
    """Input for flipping the active flag."""
    is_active: bool = Field(..., description="Whether the client's tokens may validate")


class ClientOutput(BaseModel):
    """
    Client data returned by the API.
    """
    client_id: UUID = Field(..., description="Unique identifier of the client")
    name: str
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
