"""
Storage backend interface.

A backend makes the vault durable. It never decides what goes into the
vault; VaultStore stages every change and hands it over through
``upsert``, committing in memory only once the backend returns.
"""

from abc import ABC, abstractmethod
from typing import Optional

from token_vault.core.vault import Vault


class VaultBackend(ABC):
    """Abstract persistence interface for the token vault."""

    #: Short name used in logs and metric labels
    name: str = "abstract"

    @abstractmethod
    def read(self) -> Optional[Vault]:
        """Read the persisted vault.

        Returns:
            The persisted Vault, or None if nothing has been stored yet.

        Raises:
            DeserializationError: If the stored record cannot be parsed.
            StorageOpenError: If the backend cannot be read at all.
        """

    @abstractmethod
    def upsert(self, token: str, word: str, staged: Vault) -> None:
        """Durably store a new word/token pair.

        Record-oriented backends write ``staged`` (the whole vault with the
        pair already added) under a single well-known key. Row-oriented
        backends write only the pair.

        Args:
            token: The token being assigned.
            word: The word it stands for.
            staged: The complete vault after the assignment.

        Raises:
            StorageWriteError: If the write or flush did not succeed, or a
                word cannot be encoded for storage.
        """

    def close(self) -> None:
        """Release backend resources."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
