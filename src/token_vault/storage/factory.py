"""Backend selection from settings."""

from token_vault.config.settings import VaultSettings
from token_vault.storage.base import VaultBackend
from token_vault.storage.embedded_store import EmbeddedStore
from token_vault.storage.memory_store import MemoryStore
from token_vault.storage.redis_store import RedisStore
from token_vault.storage.sql_store import SqlStore


def create_backend(settings: VaultSettings) -> VaultBackend:
    """Open the storage backend named in the settings.

    Raises:
        StorageOpenError: If the backend cannot be opened.
    """
    if settings.backend == "memory":
        return MemoryStore()
    if settings.backend == "sql":
        return SqlStore(settings.path)
    if settings.backend == "redis":
        return RedisStore.from_url(settings.redis_url)
    return EmbeddedStore(settings.path)
