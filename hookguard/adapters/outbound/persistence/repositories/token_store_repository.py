# hookguard/adapters/outbound/persistence/repositories/token_store_repository.py (async version)

"""
SQL implementation of the token store.

Every operation runs in its own short session, commits on its own and is
bounded by a timeout. Driver errors and timeouts surface as
StorageUnavailableException; integrity violations as InvalidInputException.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, TypeVar
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hookguard.adapters.outbound.persistence.models import Client, TokenUsageLog, WebhookToken
from hookguard.application.ports.outbound import ITokenStore
from hookguard.domain.exceptions import InvalidInputException, StorageUnavailableException
from hookguard.domain.models.client_domain_model import Client as DomainClient
from hookguard.domain.models.token_usage_domain_model import TokenUsageRecord
from hookguard.domain.models.webhook_token_domain_model import WebhookToken as DomainWebhookToken

T = TypeVar("T")


class AsyncSqlTokenStore(ITokenStore):
    """
    Token store backed by an SQLAlchemy async session factory.

    Attributes:
        session_factory: Factory producing AsyncSession objects
        timeout: Upper bound in seconds for each operation
    """

    def __init__(self, session_factory: async_sessionmaker, timeout: float = 5.0):
        self.session_factory = session_factory
        self.timeout = timeout
        self.logger = logging.getLogger(f"{__name__}.{type(self).__name__}")

    async def _run(self, operation: str, work: Callable[[AsyncSession], Awaitable[T]]) -> T:
        async def in_session() -> T:
            # Closing the session rolls back anything left uncommitted
            async with self.session_factory() as session:
                result = await work(session)
                await session.commit()
                return result

        try:
            return await asyncio.wait_for(in_session(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            self.logger.error(f"Timed out after {self.timeout}s during {operation}")
            raise StorageUnavailableException(original_error=e)
        except IntegrityError as e:
            # Duplicate key or dangling reference: retrying cannot succeed
            self.logger.warning(f"Integrity violation during {operation}: {str(e.orig)}")
            raise InvalidInputException(detail="Record conflicts with stored data")
        except SQLAlchemyError as e:
            self.logger.error(f"Error during {operation}: {str(e)}")
            raise StorageUnavailableException(original_error=e)

    # ─── Clients ────────────────────────────────────────────────────────────────

    async def find_active_client(self, client_id: UUID) -> Optional[DomainClient]:
        async def work(db: AsyncSession):
            query = select(Client).where(Client.client_id == client_id, Client.is_active.is_(True))
            result = await db.execute(query)
            client = result.scalar_one_or_none()
            return self.client_to_domain(client) if client else None

        return await self._run("find_active_client", work)

    async def get_client(self, client_id: UUID) -> Optional[DomainClient]:
        async def work(db: AsyncSession):
            client = await db.get(Client, client_id)
            return self.client_to_domain(client) if client else None

        return await self._run("get_client", work)

    async def insert_client(self, client: DomainClient) -> DomainClient:
        async def work(db: AsyncSession):
            db.add(Client(
                client_id=client.client_id,
                name=client.name,
                is_active=client.is_active,
                created_at=client.created_at,
                updated_at=client.updated_at,
            ))
            return client

        return await self._run("insert_client", work)

    async def update_client(self, client: DomainClient) -> DomainClient:
        async def work(db: AsyncSession):
            await db.execute(
                update(Client)
                .where(Client.client_id == client.client_id)
                .values(name=client.name, is_active=client.is_active, updated_at=client.updated_at)
            )
            return client

        return await self._run("update_client", work)

    # ─── Tokens ─────────────────────────────────────────────────────────────────

    async def insert_token(self, token: DomainWebhookToken) -> DomainWebhookToken:
        async def work(db: AsyncSession):
            db.add(WebhookToken(
                token_id=token.token_id,
                client_id=token.client_id,
                token_hash=token.token_hash,
                expires_at=token.expires_at,
                is_revoked=token.is_revoked,
                revoked_at=token.revoked_at,
                created_at=token.created_at,
                last_used_at=token.last_used_at,
            ))
            return token

        return await self._run("insert_token", work)

    async def get_token(self, token_id: UUID) -> Optional[DomainWebhookToken]:
        async def work(db: AsyncSession):
            token = await db.get(WebhookToken, token_id)
            return self.token_to_domain(token) if token else None

        return await self._run("get_token", work)

    async def find_token_by_hash(self, token_hash: str) -> Optional[Tuple[DomainWebhookToken, DomainClient]]:
        async def work(db: AsyncSession):
            query = (
                select(WebhookToken, Client)
                .join(Client, WebhookToken.client_id == Client.client_id)
                .where(WebhookToken.token_hash == token_hash)
            )
            result = await db.execute(query)
            row = result.one_or_none()
            if row is None:
                return None
            token, client = row
            return self.token_to_domain(token), self.client_to_domain(client)

        return await self._run("find_token_by_hash", work)

    async def update_token(self, token: DomainWebhookToken) -> DomainWebhookToken:
        """
        Persist mutable token fields. A revoked flag already stored is never
        cleared, so a stale copy cannot undo a concurrent revocation.
        """
        async def work(db: AsyncSession):
            values: Dict[str, Any] = {
                "last_used_at": token.last_used_at,
                "expires_at": token.expires_at,
            }
            if token.is_revoked:
                values.update(is_revoked=True, revoked_at=token.revoked_at)
            await db.execute(
                update(WebhookToken).where(WebhookToken.token_id == token.token_id).values(**values)
            )
            return token

        return await self._run("update_token", work)

    async def mark_token_revoked(self, token_id: UUID, revoked_at: datetime) -> bool:
        async def work(db: AsyncSession):
            result = await db.execute(
                update(WebhookToken)
                .where(WebhookToken.token_id == token_id, WebhookToken.is_revoked.is_(False))
                .values(is_revoked=True, revoked_at=revoked_at)
            )
            return result.rowcount == 1

        return await self._run("mark_token_revoked", work)

    async def list_client_tokens(self, client_id: UUID) -> List[DomainWebhookToken]:
        async def work(db: AsyncSession):
            query = (
                select(WebhookToken)
                .where(WebhookToken.client_id == client_id)
                .order_by(WebhookToken.created_at.desc())
            )
            result = await db.execute(query)
            return [self.token_to_domain(token) for token in result.scalars().all()]

        return await self._run("list_client_tokens", work)

    # ─── Usage records ──────────────────────────────────────────────────────────

    async def insert_usage_record(self, record: TokenUsageRecord) -> TokenUsageRecord:
        async def work(db: AsyncSession):
            row = TokenUsageLog(
                token_id=record.token_id,
                ip_address=record.ip_address,
                endpoint_path=record.endpoint_path,
                is_successful=record.is_successful,
                error_message=record.error_message,
                used_at=record.used_at,
            )
            db.add(row)
            await db.flush()
            record.log_id = row.log_id
            return record

        return await self._run("insert_usage_record", work)

    async def list_usage_records(self, token_id: UUID) -> List[TokenUsageRecord]:
        async def work(db: AsyncSession):
            query = (
                select(TokenUsageLog)
                .where(TokenUsageLog.token_id == token_id)
                .order_by(TokenUsageLog.log_id.asc())
            )
            result = await db.execute(query)
            return [self.usage_to_domain(row) for row in result.scalars().all()]

        return await self._run("list_usage_records", work)

    # ─── Mapping ────────────────────────────────────────────────────────────────

    @staticmethod
    def client_to_domain(db_model: Client) -> DomainClient:
        return DomainClient(
            client_id=db_model.client_id,
            name=db_model.name,
            is_active=db_model.is_active,
            created_at=db_model.created_at,
            updated_at=db_model.updated_at,
        )

    @staticmethod
    def token_to_domain(db_model: WebhookToken) -> DomainWebhookToken:
        return DomainWebhookToken(
            token_id=db_model.token_id,
            client_id=db_model.client_id,
            token_hash=db_model.token_hash,
            expires_at=db_model.expires_at,
            created_at=db_model.created_at,
            is_revoked=db_model.is_revoked,
            revoked_at=db_model.revoked_at,
            last_used_at=db_model.last_used_at,
        )

    @staticmethod
    def usage_to_domain(db_model: TokenUsageLog) -> TokenUsageRecord:
        return TokenUsageRecord(
            log_id=db_model.log_id,
            token_id=db_model.token_id,
            ip_address=db_model.ip_address,
            endpoint_path=db_model.endpoint_path,
            is_successful=db_model.is_successful,
            error_message=db_model.error_message,
            used_at=db_model.used_at,
        )
