"""Token lifecycle: generation, validation, revocation, refresh and usage logging."""

import asyncio
import uuid
from datetime import timedelta

import pytest

from hookguard.adapters.outbound.persistence.memory_store import InMemoryTokenStore
from hookguard.application.use_cases.webhook_token_use_cases import (
    MAX_ERROR_MESSAGE_LENGTH,
    AsyncWebhookTokenService,
)
from hookguard.domain.exceptions import (
    ClientInactiveException,
    ClientNotFoundException,
    InvalidTokenException,
    StorageUnavailableException,
    TokenNotFoundException,
)
from hookguard.domain.services.token_crypto import TokenCrypto
from tests.conftest import HASHING_SALT

pytestmark = pytest.mark.anyio


@pytest.fixture
async def active_client(client_service):
    return await client_service.create_client("Billing system")


class TestGenerateToken:

    async def test_generated_token_validates(self, token_service, active_client):
        secret, token = await token_service.generate_token(active_client.client_id)

        is_valid, validated = await token_service.validate_token(secret)

        assert is_valid
        assert validated.token_id == token.token_id
        assert validated.client_id == active_client.client_id

    async def test_only_hash_is_stored(self, token_service, memory_store, active_client):
        secret, token = await token_service.generate_token(active_client.client_id)

        stored = memory_store.tokens[token.token_id]
        assert stored.token_hash == TokenCrypto.hash_secret(secret, HASHING_SALT)
        assert all(secret not in str(value) for value in vars(stored).values())

    async def test_default_expiration(self, token_service, active_client, clock):
        _, token = await token_service.generate_token(active_client.client_id)

        assert token.created_at == clock.now
        assert token.expires_at == clock.now + timedelta(days=30)
        assert not token.is_revoked
        assert token.last_used_at is None

    async def test_custom_expiration(self, token_service, active_client, clock):
        _, token = await token_service.generate_token(active_client.client_id, timedelta(hours=2))
        assert token.expires_at == clock.now + timedelta(hours=2)

    async def test_unknown_client(self, token_service):
        with pytest.raises(ClientNotFoundException):
            await token_service.generate_token(uuid.uuid4())

    async def test_inactive_client(self, token_service, client_service, active_client):
        await client_service.set_client_active(active_client.client_id, False)

        with pytest.raises(ClientInactiveException):
            await token_service.generate_token(active_client.client_id)

    async def test_max_tokens_per_client_is_not_enforced(self, token_service, active_client):
        for _ in range(token_service.max_tokens_per_client + 2):
            await token_service.generate_token(active_client.client_id)

        tokens = await token_service.store.list_client_tokens(active_client.client_id)
        assert len(tokens) == token_service.max_tokens_per_client + 2


class TestValidateToken:

    @pytest.mark.parametrize("presented", [None, ""])
    async def test_empty_input_skips_store(self, presented):
        class ExplodingStore(InMemoryTokenStore):
            async def find_token_by_hash(self, token_hash):
                raise AssertionError("store must not be consulted")

        service = AsyncWebhookTokenService(ExplodingStore(), HASHING_SALT, timedelta(days=1))
        assert await service.validate_token(presented) == (False, None)

    async def test_unknown_secret(self, token_service, active_client):
        await token_service.generate_token(active_client.client_id)
        assert await token_service.validate_token("not-a-real-token") == (False, None)

    async def test_expired_token_is_invalid(self, token_service, active_client, clock):
        secret, _ = await token_service.generate_token(active_client.client_id, timedelta(days=1))

        clock.advance(days=1, seconds=-1)
        assert (await token_service.validate_token(secret))[0]

        clock.advance(seconds=1)
        assert await token_service.validate_token(secret) == (False, None)

    async def test_inactive_client_invalidates_tokens(self, token_service, client_service, active_client):
        secret, _ = await token_service.generate_token(active_client.client_id)
        await client_service.set_client_active(active_client.client_id, False)

        assert await token_service.validate_token(secret) == (False, None)

        await client_service.set_client_active(active_client.client_id, True)
        assert (await token_service.validate_token(secret))[0]

    async def test_records_last_use(self, token_service, memory_store, active_client, clock):
        secret, token = await token_service.generate_token(active_client.client_id)
        clock.advance(minutes=5)

        await token_service.validate_token(secret)

        assert memory_store.tokens[token.token_id].last_used_at == clock.now

    async def test_last_use_failure_does_not_fail_validation(self, clock):
        class TouchFailingStore(InMemoryTokenStore):
            async def update_token(self, token):
                raise StorageUnavailableException()

        store = TouchFailingStore()
        service = AsyncWebhookTokenService(store, HASHING_SALT, timedelta(days=1), clock=clock)
        client = await _add_client(store, clock)
        secret, _ = await service.generate_token(client.client_id)

        is_valid, token = await service.validate_token(secret)

        assert is_valid
        assert token.client_id == client.client_id

    async def test_storage_failure_is_not_reported_as_invalid(self, clock):
        class LookupFailingStore(InMemoryTokenStore):
            async def find_token_by_hash(self, token_hash):
                raise StorageUnavailableException()

        service = AsyncWebhookTokenService(LookupFailingStore(), HASHING_SALT, timedelta(days=1), clock=clock)

        with pytest.raises(StorageUnavailableException):
            await service.validate_token("some-secret")


class TestRevokeToken:

    async def test_revoked_token_never_validates_again(self, token_service, active_client, clock):
        secret, token = await token_service.generate_token(active_client.client_id)

        revoked = await token_service.revoke_token(token.token_id)

        assert revoked.is_revoked
        assert revoked.revoked_at == clock.now
        assert await token_service.validate_token(secret) == (False, None)
        clock.advance(days=365)
        assert await token_service.validate_token(secret) == (False, None)

    async def test_revoke_is_idempotent(self, token_service, memory_store, active_client, clock):
        _, token = await token_service.generate_token(active_client.client_id)
        first = await token_service.revoke_token(token.token_id)
        clock.advance(minutes=1)

        second = await token_service.revoke_token(token.token_id)

        assert second.is_revoked
        assert second.revoked_at == first.revoked_at
        assert memory_store.tokens[token.token_id].revoked_at == first.revoked_at

    async def test_unknown_token(self, token_service):
        with pytest.raises(TokenNotFoundException):
            await token_service.revoke_token(uuid.uuid4())

    async def test_concurrent_revokes_apply_once(self, token_service, memory_store, active_client):
        _, token = await token_service.generate_token(active_client.client_id)
        applied = []
        original = memory_store.mark_token_revoked

        async def counting_mark(token_id, revoked_at):
            result = await original(token_id, revoked_at)
            applied.append(result)
            return result

        memory_store.mark_token_revoked = counting_mark
        results = await asyncio.gather(*(token_service.revoke_token(token.token_id) for _ in range(20)))

        assert all(r.is_revoked for r in results)
        assert applied.count(True) == 1

    async def test_losing_revoke_reports_persisted_timestamp(self, clock):
        winner_at = clock.now - timedelta(seconds=30)

        class RacedStore(InMemoryTokenStore):
            async def mark_token_revoked(self, token_id, revoked_at):
                # A concurrent caller persists its revocation first
                await super().mark_token_revoked(token_id, winner_at)
                return False

        store = RacedStore()
        service = AsyncWebhookTokenService(store, HASHING_SALT, timedelta(days=1), clock=clock)
        client = await _add_client(store, clock)
        _, token = await service.generate_token(client.client_id)

        revoked = await service.revoke_token(token.token_id)

        assert revoked.is_revoked
        assert revoked.revoked_at == winner_at
        assert revoked.revoked_at == store.tokens[token.token_id].revoked_at

    async def test_stale_last_use_touch_does_not_undo_revoke(self, token_service, memory_store, active_client):
        secret, token = await token_service.generate_token(active_client.client_id)
        _, stale = await token_service.validate_token(secret)

        await token_service.revoke_token(token.token_id)
        await memory_store.update_token(stale)

        assert memory_store.tokens[token.token_id].is_revoked
        assert await token_service.validate_token(secret) == (False, None)


class TestRefreshToken:

    async def test_refresh_rotates_secret(self, token_service, active_client):
        old_secret, old_token = await token_service.generate_token(active_client.client_id)

        new_secret, new_token = await token_service.refresh_token(old_secret)

        assert new_secret != old_secret
        assert new_token.token_id != old_token.token_id
        assert new_token.client_id == old_token.client_id
        assert await token_service.validate_token(old_secret) == (False, None)
        assert (await token_service.validate_token(new_secret))[0]

    async def test_refresh_with_new_expiration(self, token_service, active_client, clock):
        secret, _ = await token_service.generate_token(active_client.client_id)
        _, new_token = await token_service.refresh_token(secret, timedelta(days=7))
        assert new_token.expires_at == clock.now + timedelta(days=7)

    @pytest.mark.parametrize("presented", [None, "", "bogus"])
    async def test_refresh_rejects_invalid_secret(self, token_service, presented):
        with pytest.raises(InvalidTokenException):
            await token_service.refresh_token(presented)

    async def test_concurrent_refresh_issues_one_token(self, token_service, active_client):
        secret, _ = await token_service.generate_token(active_client.client_id)

        results = await asyncio.gather(
            *(token_service.refresh_token(secret) for _ in range(5)),
            return_exceptions=True,
        )

        issued = [r for r in results if not isinstance(r, Exception)]
        assert len(issued) == 1
        assert all(isinstance(r, InvalidTokenException) for r in results if isinstance(r, Exception))

    async def test_old_token_stays_revoked_when_issue_fails(self, clock):
        class IssueFailingStore(InMemoryTokenStore):
            fail_inserts = False

            async def insert_token(self, token):
                if self.fail_inserts:
                    raise StorageUnavailableException()
                return await super().insert_token(token)

        store = IssueFailingStore()
        service = AsyncWebhookTokenService(store, HASHING_SALT, timedelta(days=1), clock=clock)
        client = await _add_client(store, clock)
        secret, token = await service.generate_token(client.client_id)
        store.fail_inserts = True

        with pytest.raises(StorageUnavailableException):
            await service.refresh_token(secret)

        assert store.tokens[token.token_id].is_revoked
        assert await service.validate_token(secret) == (False, None)

    async def test_end_to_end_lifecycle(self, token_service, active_client):
        secret, token = await token_service.generate_token(active_client.client_id)
        assert (await token_service.validate_token(secret))[0]

        await token_service.revoke_token(token.token_id)
        assert not (await token_service.validate_token(secret))[0]

        with pytest.raises(InvalidTokenException):
            await token_service.refresh_token(secret)


class TestLogUsage:

    async def test_appends_record(self, token_service, memory_store, active_client, clock):
        _, token = await token_service.generate_token(active_client.client_id)

        assert await token_service.log_usage(token.token_id, "10.0.0.1", "/api/v1/webhook", True)

        records = await memory_store.list_usage_records(token.token_id)
        assert len(records) == 1
        assert records[0].ip_address == "10.0.0.1"
        assert records[0].endpoint_path == "/api/v1/webhook"
        assert records[0].is_successful
        assert records[0].error_message is None
        assert records[0].used_at == clock.now

    async def test_truncates_long_error(self, token_service, memory_store, active_client):
        _, token = await token_service.generate_token(active_client.client_id)

        await token_service.log_usage(token.token_id, None, "/api/v1/webhook", False, "x" * 5000)

        records = await memory_store.list_usage_records(token.token_id)
        assert len(records[0].error_message) == MAX_ERROR_MESSAGE_LENGTH
        assert not records[0].is_successful

    async def test_failure_is_counted_not_raised(self, token_service):
        assert not await token_service.log_usage(uuid.uuid4(), None, "/api/v1/webhook", True)
        assert token_service.usage_log_failures == 1


async def _add_client(store, clock):
    from hookguard.application.use_cases.client_use_cases import AsyncClientService

    return await AsyncClientService(store, clock=clock).create_client("Client")
