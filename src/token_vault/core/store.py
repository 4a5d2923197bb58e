"""
Vault Store

The single owner of the live vault. All reads and writes go through this
class. Writes are persisted through a storage backend before they become
visible in memory.
"""

from typing import Optional

from token_vault.core.errors import (
    DeserializationError,
    StorageWriteError,
    TokenSpaceExhausted,
)
from token_vault.core.generator import TokenGenerator
from token_vault.core.guard import AccessGuard
from token_vault.core.vault import Vault
from token_vault.logging.setup import get_logger
from token_vault.metrics.collectors import (
    MINT_EXHAUSTED,
    STORAGE_WRITE_ERRORS,
    TOKEN_COLLISIONS,
    TOKENS_MINTED,
    VAULT_SIZE,
)
from token_vault.storage.base import VaultBackend

logger = get_logger(__name__)

DEFAULT_MAX_MINT_ATTEMPTS = 2


class VaultStore:
    """Owns the in-memory vault and keeps it in step with storage.

    Mutations follow persist-then-commit: the new pair is added to a copy
    of the vault, the copy is handed to the backend, and only a successful
    write swaps it in. A failed write leaves the live vault untouched.

    Thread Safety:
        Mutating calls take the AccessGuard. Callers that need several
        steps to be atomic (such as a whole tokenize call) hold the same
        guard around them; the guard is reentrant.

    Example:
        >>> store = VaultStore(MemoryStore())
        >>> token = store.token_for("alice")
        >>> store.lookup_word(token)
        'alice'
    """

    def __init__(
        self,
        backend: VaultBackend,
        generator: Optional[TokenGenerator] = None,
        guard: Optional[AccessGuard] = None,
        max_mint_attempts: int = DEFAULT_MAX_MINT_ATTEMPTS,
    ) -> None:
        """Initialize the store and load persisted state.

        Args:
            backend: Storage backend, already opened.
            generator: Token generator (default: 16-character tokens).
            guard: Shared access guard (default: a new one).
            max_mint_attempts: Candidates tried before TokenSpaceExhausted.
        """
        if max_mint_attempts < 1:
            raise ValueError(f"max_mint_attempts must be positive, got {max_mint_attempts}")

        self._backend = backend
        self.generator = generator or TokenGenerator()
        self.guard = guard or AccessGuard()
        self.max_mint_attempts = max_mint_attempts
        self._vault = Vault()
        self.load()

    @property
    def backend(self) -> VaultBackend:
        return self._backend

    def load(self) -> Vault:
        """(Re)load the vault from storage.

        A missing or unparsable record yields an empty vault.

        Returns:
            The vault now held in memory.

        Raises:
            StorageOpenError: If the backend cannot be read at all.
        """
        with self.guard.exclusive():
            try:
                persisted = self._backend.read()
            except DeserializationError as e:
                logger.warning(
                    "Persisted vault is unreadable, starting empty",
                    extra={
                        "event": "vault_load_corrupt",
                        "backend": self._backend.name,
                        "error": str(e),
                    },
                )
                persisted = None

            self._vault = persisted if persisted is not None else Vault()
            VAULT_SIZE.set(len(self._vault))

            logger.info(
                "Vault loaded",
                extra={
                    "event": "vault_loaded",
                    "backend": self._backend.name,
                    "entries": len(self._vault),
                },
            )
            return self._vault

    def lookup_token(self, word: str) -> Optional[str]:
        """Return the token assigned to a word, or None."""
        return self._vault.get_token(word)

    def lookup_word(self, token: str) -> Optional[str]:
        """Return the word behind a token, or None."""
        return self._vault.get_word(token)

    def mint_token(self) -> str:
        """Mint a token that is not live in the vault.

        Returns:
            An unused token.

        Raises:
            TokenSpaceExhausted: If every attempt produced a live token.
        """
        with self.guard.exclusive():
            for _ in range(self.max_mint_attempts):
                candidate = self.generator.mint()
                if not self._vault.has_token(candidate):
                    return candidate
                TOKEN_COLLISIONS.inc()

            MINT_EXHAUSTED.inc()
            logger.error(
                "Token minting exhausted its retries",
                extra={"event": "mint_exhausted", "attempts": self.max_mint_attempts},
            )
            raise TokenSpaceExhausted(self.max_mint_attempts)

    def assign(self, word: str, token: str) -> None:
        """Persist a new word/token pair, then commit it in memory.

        Assigning a pair that already exists is a no-op.

        Raises:
            MappingConflictError: If the pair conflicts with an existing one.
            StorageWriteError: If the backend could not persist the pair.
        """
        with self.guard.exclusive():
            if self._vault.get_token(word) == token:
                return

            staged = self._vault.copy()
            staged.add(word, token)

            try:
                self._backend.upsert(token, word, staged)
            except StorageWriteError as e:
                STORAGE_WRITE_ERRORS.labels(backend=self._backend.name).inc()
                logger.error(
                    "Vault persist failed, assignment discarded",
                    extra={
                        "event": "vault_persist_failed",
                        "backend": self._backend.name,
                        "error": str(e),
                    },
                )
                raise

            self._vault = staged
            VAULT_SIZE.set(len(staged))

    def token_for(self, word: str) -> str:
        """Return the word's token, minting and persisting one if needed.

        Raises:
            TokenSpaceExhausted: If no free token could be minted.
            StorageWriteError: If the new pair could not be persisted.
        """
        with self.guard.exclusive():
            existing = self._vault.get_token(word)
            if existing is not None:
                return existing

            token = self.mint_token()
            self.assign(word, token)
            TOKENS_MINTED.inc()
            return token

    def snapshot(self) -> Vault:
        """Return a copy of the current vault."""
        with self.guard.exclusive():
            return self._vault.copy()

    @property
    def size(self) -> int:
        return len(self._vault)

    def close(self) -> None:
        """Close the storage backend."""
        with self.guard.exclusive():
            self._backend.close()

    def __repr__(self) -> str:
        return f"VaultStore(backend={self._backend!r}, entries={len(self._vault)})"
