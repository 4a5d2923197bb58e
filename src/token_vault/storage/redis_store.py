"""
Redis-based storage for the token vault.

The serialized vault lives under a single key with no expiry. How durable
a write is depends on the server's persistence settings (AOF with
``appendfsync always`` gives the strongest guarantee).
"""

from typing import Optional

import redis

from token_vault.core.errors import StorageOpenError, StorageWriteError
from token_vault.core.vault import Vault
from token_vault.storage.base import VaultBackend


class RedisStore(VaultBackend):
    """Redis storage for the vault record.

    Example:
        >>> import redis
        >>> client = redis.Redis(host='localhost', port=6379)
        >>> store = RedisStore(client)
        >>> vault = store.read()
    """

    name = "redis"

    KEY = "token_vault:vault"

    def __init__(self, redis_client, key: Optional[str] = None) -> None:
        """Initialize the Redis store.

        Args:
            redis_client: Redis client instance (redis.Redis or compatible).
            key: Override for the record key.
        """
        self._client = redis_client
        self.key = key or self.KEY

    @classmethod
    def from_url(cls, url: str) -> "RedisStore":
        """Connect to Redis and check that the server answers.

        Raises:
            StorageOpenError: If the server cannot be reached.
        """
        try:
            client = redis.Redis.from_url(url)
            client.ping()
        except redis.RedisError as e:
            raise StorageOpenError(f"Cannot connect to Redis: {e}") from e
        return cls(client)

    def read(self) -> Optional[Vault]:
        try:
            data = self._client.get(self.key)
        except redis.RedisError as e:
            raise StorageOpenError(f"Cannot read vault record from Redis: {e}") from e

        if data is None:
            return None
        return Vault.from_json(data)

    def upsert(self, token: str, word: str, staged: Vault) -> None:
        try:
            self._client.set(self.key, staged.to_json())
        except UnicodeEncodeError:
            raise StorageWriteError(
                "Cannot persist vault record to Redis: a word is not valid UTF-8"
            ) from None
        except redis.RedisError as e:
            raise StorageWriteError(f"Cannot persist vault record to Redis: {e}") from e

    def close(self) -> None:
        self._client.close()

    def __repr__(self) -> str:
        return f"RedisStore(key={self.key!r})"
