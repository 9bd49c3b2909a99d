# hookguard/application/use_cases/webhook_token_use_cases.py

"""
Service for the webhook token lifecycle.

This module implements generation, validation, revocation and refresh of
webhook tokens, plus usage logging for requests that passed authentication.
It is the only writer of token state.
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Callable, Optional, Tuple
from uuid import UUID

from hookguard.application.ports.inbound import IWebhookTokenUseCase
from hookguard.application.ports.outbound import ITokenStore
from hookguard.domain.exceptions import (
    ClientInactiveException,
    ClientNotFoundException,
    InvalidTokenException,
    StorageUnavailableException,
    TokenNotFoundException,
)
from hookguard.domain.models.token_usage_domain_model import TokenUsageRecord
from hookguard.domain.models.webhook_token_domain_model import WebhookToken
from hookguard.domain.services.token_crypto import TokenCrypto
from hookguard.shared.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)

# Column sizes of token_usage_logs
MAX_ERROR_MESSAGE_LENGTH = 1024
MAX_ENDPOINT_PATH_LENGTH = 256


class AsyncWebhookTokenService(IWebhookTokenUseCase):
    """
    Token lifecycle state machine.

    A token is Active until it expires (derived from ``expires_at``, never
    persisted) or is revoked (persisted, terminal).
    """

    def __init__(
            self,
            store: ITokenStore,
            hashing_salt: str,
            default_expiration: timedelta,
            max_tokens_per_client: Optional[int] = None,
            clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.hashing_salt = hashing_salt
        self.default_expiration = default_expiration
        # Declared configuration only; generation does not enforce it.
        self.max_tokens_per_client = max_tokens_per_client
        self.clock = clock
        self.usage_log_failures = 0

    def _hash(self, secret: str) -> str:
        return TokenCrypto.hash_secret(secret, self.hashing_salt)

    async def generate_token(
            self, client_id: UUID, expiration: Optional[timedelta] = None
    ) -> Tuple[str, WebhookToken]:
        """
        Issue a new token for an active client.

        Args:
            client_id: Owning client
            expiration: Lifetime of the token, defaults to the configured one

        Returns:
            Tuple (plaintext secret, persisted token record). The secret is
            not stored anywhere and cannot be recovered later.

        Raises:
            ClientNotFoundException: If the client does not exist
            ClientInactiveException: If the client is deactivated
            StorageUnavailableException: If the store fails
        """
        client = await self.store.find_active_client(client_id)
        if client is None:
            logger.warning(f"Token generation refused: client {client_id} not found or inactive")
            if await self.store.get_client(client_id) is None:
                raise ClientNotFoundException(client_id=client_id)
            raise ClientInactiveException(client_id=client_id)

        secret = TokenCrypto.generate_secret()
        now = self.clock()
        token = WebhookToken(
            token_id=uuid.uuid4(),
            client_id=client.client_id,
            token_hash=self._hash(secret),
            expires_at=now + (expiration if expiration is not None else self.default_expiration),
            created_at=now,
        )

        token = await self.store.insert_token(token)
        logger.info(f"Token {token.token_id} issued for client {client_id} (expires {token.expires_at.isoformat()})")
        return secret, token

    async def validate_token(self, presented_secret: Optional[str]) -> Tuple[bool, Optional[WebhookToken]]:
        """
        Check a presented secret.

        The negative result is uniform: callers cannot tell an unknown token
        from an expired, revoked or inactive-client one.

        Returns:
            Tuple (valid, token record). The record is only returned when valid.

        Raises:
            StorageUnavailableException: If the lookup itself fails
        """
        if not presented_secret:
            return False, None

        found = await self.store.find_token_by_hash(self._hash(presented_secret))
        if found is None:
            return False, None

        token, client = found
        now = self.clock()
        if token.is_revoked or token.is_expired(now) or not client.is_active:
            logger.debug(f"Token {token.token_id} rejected")
            return False, None

        token.last_used_at = now
        try:
            await self.store.update_token(token)
        except StorageUnavailableException as e:
            # Freshness hint only; the validation result stands.
            logger.warning(f"Could not record last use of token {token.token_id}: {e.detail}")

        return True, token

    async def revoke_token(self, token_id: UUID) -> WebhookToken:
        """
        Revoke a token. Revoking an already revoked token is a no-op.

        Raises:
            TokenNotFoundException: If no token has this ID
            StorageUnavailableException: If the store fails
        """
        token = await self.store.get_token(token_id)
        if token is None:
            raise TokenNotFoundException(token_id=token_id)

        if token.is_revoked:
            logger.info(f"Token {token_id} already revoked")
            return token

        now = self.clock()
        if await self.store.mark_token_revoked(token_id, now):
            logger.info(f"Token {token_id} revoked")
            token.is_revoked = True
            token.revoked_at = now
            return token

        # Another caller won; report what it persisted
        logger.info(f"Token {token_id} was revoked concurrently")
        stored = await self.store.get_token(token_id)
        if stored is None:
            raise TokenNotFoundException(token_id=token_id)
        return stored

    async def refresh_token(
            self, presented_secret: Optional[str], new_expiration: Optional[timedelta] = None
    ) -> Tuple[str, WebhookToken]:
        """
        Replace a valid token with a new one for the same client.

        The old token is revoked first. If issuing the new token fails the
        old one stays revoked and the error propagates.

        Raises:
            InvalidTokenException: If the presented secret is not valid, or
                another refresh revoked it first
            ClientInactiveException: If the client was deactivated meanwhile
            StorageUnavailableException: If the store fails
        """
        is_valid, token = await self.validate_token(presented_secret)
        if not is_valid:
            raise InvalidTokenException()

        if not await self.store.mark_token_revoked(token.token_id, self.clock()):
            # Lost the race against a concurrent revoke or refresh.
            raise InvalidTokenException()
        logger.info(f"Token {token.token_id} revoked for refresh")

        return await self.generate_token(token.client_id, new_expiration)

    async def log_usage(
            self,
            token_id: UUID,
            ip_address: Optional[str],
            endpoint_path: str,
            is_successful: bool,
            error_message: Optional[str] = None,
    ) -> bool:
        """
        Append a usage record for a request that passed authentication.

        Persistence failures are logged and counted in ``usage_log_failures``
        and never propagate to the request.

        Returns:
            True if the record was stored
        """
        record = TokenUsageRecord(
            token_id=token_id,
            ip_address=ip_address,
            endpoint_path=endpoint_path[:MAX_ENDPOINT_PATH_LENGTH],
            is_successful=is_successful,
            error_message=error_message[:MAX_ERROR_MESSAGE_LENGTH] if error_message else None,
            used_at=self.clock(),
        )
        try:
            await self.store.insert_usage_record(record)
            return True
        except Exception as e:
            self.usage_log_failures += 1
            logger.error(
                f"Failed to record usage of token {token_id} on {endpoint_path} "
                f"(failures so far: {self.usage_log_failures}): {e}"
            )
            return False
