# hookguard/adapters/outbound/persistence/memory_store.py

"""
In-memory implementation of the token store.

Used by the test-suite and for local runs without a database. Records are
copied on the way in and out so callers never share state with the store.
"""

import threading
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from hookguard.application.ports.outbound import ITokenStore
from hookguard.domain.exceptions import InvalidInputException
from hookguard.domain.models.client_domain_model import Client
from hookguard.domain.models.token_usage_domain_model import TokenUsageRecord
from hookguard.domain.models.webhook_token_domain_model import WebhookToken


class InMemoryTokenStore(ITokenStore):
    """Dict-backed token store; every operation holds a single lock."""

    def __init__(self):
        self._lock = threading.Lock()
        self.clients: Dict[UUID, Client] = {}
        self.tokens: Dict[UUID, WebhookToken] = {}
        self.usage_records: List[TokenUsageRecord] = []
        self._next_log_id = 1

    async def find_active_client(self, client_id: UUID) -> Optional[Client]:
        with self._lock:
            client = self.clients.get(client_id)
            return replace(client) if client and client.is_active else None

    async def get_client(self, client_id: UUID) -> Optional[Client]:
        with self._lock:
            client = self.clients.get(client_id)
            return replace(client) if client else None

    async def insert_client(self, client: Client) -> Client:
        with self._lock:
            if client.client_id in self.clients:
                raise InvalidInputException(f"Client {client.client_id} already exists")
            self.clients[client.client_id] = replace(client)
            return client

    async def update_client(self, client: Client) -> Client:
        with self._lock:
            if client.client_id in self.clients:
                self.clients[client.client_id] = replace(client)
            return client

    async def insert_token(self, token: WebhookToken) -> WebhookToken:
        with self._lock:
            if token.client_id not in self.clients:
                raise InvalidInputException(f"Client {token.client_id} does not exist")
            if any(t.token_hash == token.token_hash for t in self.tokens.values()):
                raise InvalidInputException("Duplicate token hash")
            self.tokens[token.token_id] = replace(token)
            return token

    async def get_token(self, token_id: UUID) -> Optional[WebhookToken]:
        with self._lock:
            token = self.tokens.get(token_id)
            return replace(token) if token else None

    async def find_token_by_hash(self, token_hash: str) -> Optional[Tuple[WebhookToken, Client]]:
        with self._lock:
            for token in self.tokens.values():
                if token.token_hash == token_hash:
                    return replace(token), replace(self.clients[token.client_id])
            return None

    async def update_token(self, token: WebhookToken) -> WebhookToken:
        with self._lock:
            stored = self.tokens.get(token.token_id)
            if stored is None:
                return token
            stored.last_used_at = token.last_used_at
            stored.expires_at = token.expires_at
            # Never clears a stored revocation
            if token.is_revoked and not stored.is_revoked:
                stored.is_revoked = True
                stored.revoked_at = token.revoked_at
            return token

    async def mark_token_revoked(self, token_id: UUID, revoked_at: datetime) -> bool:
        with self._lock:
            stored = self.tokens.get(token_id)
            if stored is None or stored.is_revoked:
                return False
            stored.is_revoked = True
            stored.revoked_at = revoked_at
            return True

    async def list_client_tokens(self, client_id: UUID) -> List[WebhookToken]:
        with self._lock:
            tokens = [replace(t) for t in self.tokens.values() if t.client_id == client_id]
        return sorted(tokens, key=lambda t: t.created_at, reverse=True)

    async def insert_usage_record(self, record: TokenUsageRecord) -> TokenUsageRecord:
        with self._lock:
            if record.token_id not in self.tokens:
                raise InvalidInputException(f"Token {record.token_id} does not exist")
            record.log_id = self._next_log_id
            self._next_log_id += 1
            self.usage_records.append(replace(record))
            return record

    async def list_usage_records(self, token_id: UUID) -> List[TokenUsageRecord]:
        with self._lock:
            return [replace(r) for r in self.usage_records if r.token_id == token_id]
