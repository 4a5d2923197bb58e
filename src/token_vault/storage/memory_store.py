"""
Memory-based storage for the token vault.

Used for development and testing without a database. The vault record is
kept in its serialized form so that reads go through the same parsing
path as the on-disk backends.
"""

import threading
from typing import Optional

from token_vault.core.errors import StorageWriteError
from token_vault.core.vault import Vault
from token_vault.storage.base import VaultBackend


class MemoryStore(VaultBackend):
    """In-memory record store.

    Features:
    - Thread-safe operations
    - Optional seed record, including deliberately corrupt ones
    - Write failure injection for exercising error paths

    Example:
        >>> store = MemoryStore()
        >>> staged = Vault()
        >>> staged.add("alice", "q1Vx3_eTzR0aQmPb")
        >>> store.upsert("q1Vx3_eTzR0aQmPb", "alice", staged)
        >>> store.read().get_word("q1Vx3_eTzR0aQmPb")
        'alice'
    """

    name = "memory"

    def __init__(self, record: Optional[str] = None, fail_writes: bool = False) -> None:
        """Initialize the memory store.

        Args:
            record: Optional serialized vault to start from.
            fail_writes: If True, every upsert raises StorageWriteError.
        """
        self._record = record
        self.fail_writes = fail_writes
        self.write_count = 0
        self._lock = threading.RLock()

    def read(self) -> Optional[Vault]:
        with self._lock:
            if self._record is None:
                return None
            return Vault.from_json(self._record)

    def upsert(self, token: str, word: str, staged: Vault) -> None:
        with self._lock:
            if self.fail_writes:
                raise StorageWriteError("Memory store is configured to fail writes")
            self._record = staged.to_json()
            self.write_count += 1

    @property
    def record(self) -> Optional[str]:
        """The raw serialized record, if any."""
        with self._lock:
            return self._record

    def __repr__(self) -> str:
        return f"MemoryStore(writes={self.write_count})"
