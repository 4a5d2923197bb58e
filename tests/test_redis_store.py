"""
Redis storage tests

Covers RedisStore against a mock client:
- record read/write under the fixed key
- error translation
- connection checks in from_url
"""

from unittest.mock import Mock, patch

import pytest
import redis

from token_vault.core.errors import StorageOpenError, StorageWriteError
from token_vault.core.store import VaultStore
from token_vault.core.vault import Vault
from token_vault.storage.redis_store import RedisStore


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def mock_redis():
    """Create a mock Redis client."""
    client = Mock()
    client.get = Mock(return_value=None)
    client.set = Mock(return_value=True)
    client.close = Mock()
    return client


@pytest.fixture
def redis_store(mock_redis):
    """Create a RedisStore with mock client."""
    return RedisStore(mock_redis)


@pytest.fixture
def sample_vault():
    """Create a sample Vault for testing."""
    vault = Vault()
    vault.add("alice", "tok_alice_000001")
    vault.add("43.", "tok_age_00000001")
    return vault


# ============================================================================
# Basic Operations Tests
# ============================================================================


class TestRedisStoreBasicOperations:
    """Test reading and writing the vault record."""

    def test_init(self, mock_redis):
        """Test RedisStore initialization."""
        store = RedisStore(mock_redis)
        assert store.key == "token_vault:vault"
        assert store._client is mock_redis

    def test_custom_key(self, mock_redis):
        """Test overriding the record key."""
        store = RedisStore(mock_redis, key="tenant-a:vault")
        store.read()
        mock_redis.get.assert_called_once_with("tenant-a:vault")

    def test_read_missing(self, redis_store, mock_redis):
        """Test reading when no record exists."""
        assert redis_store.read() is None
        mock_redis.get.assert_called_once_with("token_vault:vault")

    def test_read_existing(self, redis_store, mock_redis, sample_vault):
        """Test reading a stored record (bytes, as redis-py returns)."""
        mock_redis.get.return_value = sample_vault.to_json().encode("utf-8")

        assert redis_store.read() == sample_vault

    def test_upsert_writes_whole_record(self, redis_store, mock_redis, sample_vault):
        """Test that upsert stores the staged vault without expiry."""
        redis_store.upsert("tok_age_00000001", "43.", sample_vault)

        mock_redis.set.assert_called_once()
        key, value = mock_redis.set.call_args[0]
        assert key == "token_vault:vault"
        assert Vault.from_json(value) == sample_vault
        assert "ex" not in mock_redis.set.call_args[1]

    def test_close(self, redis_store, mock_redis):
        """Test that close closes the client."""
        redis_store.close()
        mock_redis.close.assert_called_once()


# ============================================================================
# Error Handling Tests
# ============================================================================


class TestRedisStoreErrors:
    """Test error translation."""

    def test_unencodable_word(self, redis_store, mock_redis, sample_vault):
        """Encoding failures on write raise StorageWriteError."""
        mock_redis.set.side_effect = UnicodeEncodeError(
            "utf-8", "caf\udce9", 3, 4, "surrogates not allowed"
        )

        with pytest.raises(StorageWriteError) as exc_info:
            redis_store.upsert("tok_cafe_0000001", "caf\udce9", sample_vault)
        assert "caf" not in str(exc_info.value)

    def test_write_error(self, redis_store, mock_redis, sample_vault):
        """Redis failures on write raise StorageWriteError."""
        mock_redis.set.side_effect = redis.ConnectionError("connection lost")

        with pytest.raises(StorageWriteError):
            redis_store.upsert("tok_age_00000001", "43.", sample_vault)

    def test_read_error(self, redis_store, mock_redis):
        """Redis failures on read raise StorageOpenError."""
        mock_redis.get.side_effect = redis.TimeoutError("timed out")

        with pytest.raises(StorageOpenError):
            redis_store.read()

    def test_failed_write_not_committed(self, redis_store, mock_redis):
        """A failed SET leaves the VaultStore unchanged."""
        store = VaultStore(redis_store)
        mock_redis.set.side_effect = redis.ConnectionError("connection lost")

        with pytest.raises(StorageWriteError):
            store.token_for("alice")
        assert store.size == 0

    def test_corrupt_record_loads_empty(self, redis_store, mock_redis):
        """A garbage record gives an empty vault."""
        mock_redis.get.return_value = b"\xff\xfe"

        store = VaultStore(redis_store)
        assert store.size == 0


# ============================================================================
# Connection Tests
# ============================================================================


class TestRedisStoreFromUrl:
    """Test connecting by URL."""

    def test_from_url_pings(self):
        """Test that from_url checks the connection."""
        client = Mock()
        with patch.object(redis.Redis, "from_url", return_value=client) as mock_from_url:
            store = RedisStore.from_url("redis://localhost:6379/0")

        mock_from_url.assert_called_once_with("redis://localhost:6379/0")
        client.ping.assert_called_once()
        assert store._client is client

    def test_from_url_unreachable(self):
        """Test that an unreachable server raises StorageOpenError."""
        client = Mock()
        client.ping.side_effect = redis.ConnectionError("refused")
        with patch.object(redis.Redis, "from_url", return_value=client):
            with pytest.raises(StorageOpenError):
                RedisStore.from_url("redis://localhost:1/0")
