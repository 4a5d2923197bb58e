"""Storage backends for the token vault."""

from token_vault.storage.base import VaultBackend
from token_vault.storage.embedded_store import EmbeddedStore
from token_vault.storage.factory import create_backend
from token_vault.storage.memory_store import MemoryStore
from token_vault.storage.redis_store import RedisStore
from token_vault.storage.sql_store import SqlStore

__all__ = [
    "VaultBackend",
    "MemoryStore",
    "EmbeddedStore",
    "SqlStore",
    "RedisStore",
    "create_backend",
]
