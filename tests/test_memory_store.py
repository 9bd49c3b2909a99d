import pytest

from hookguard.adapters.outbound.persistence.memory_store import InMemoryTokenStore
from tests.store_contract import NOW, TokenStoreContract, make_client, make_token


class TestInMemoryTokenStore(TokenStoreContract):

    @pytest.fixture
    def store(self):
        return InMemoryTokenStore()

    @pytest.mark.anyio
    async def test_returned_records_are_copies(self, store):
        client = await store.insert_client(make_client())
        token = await store.insert_token(make_token(client.client_id))

        fetched = await store.get_token(token.token_id)
        fetched.is_revoked = True

        assert store.tokens[token.token_id].is_revoked is False

    @pytest.mark.anyio
    async def test_duplicate_client_is_rejected(self, store):
        from hookguard.domain.exceptions import InvalidInputException

        client = await store.insert_client(make_client())
        with pytest.raises(InvalidInputException):
            await store.insert_client(client)
