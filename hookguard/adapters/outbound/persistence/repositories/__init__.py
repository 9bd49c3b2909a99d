# hookguard/adapters/outbound/persistence/repositories/__init__.py (async version)

"""
Token store adapters.

The SQL adapter backs the running service; the in-memory adapter serves
tests and single-process setups.
"""

from hookguard.adapters.outbound.persistence.repositories.token_store_repository import AsyncSqlTokenStore
from hookguard.adapters.outbound.persistence.memory_store import InMemoryTokenStore

__all__ = [
    "AsyncSqlTokenStore",
    "InMemoryTokenStore",
]
