"""
Tokenization Engine

Splits text into whitespace-delimited words and substitutes each one with
its vault token, or reverses the substitution.

Example:
    >>> from token_vault.core.engine import TokenizationEngine
    >>> from token_vault.core.store import VaultStore
    >>> from token_vault.storage.memory_store import MemoryStore
    >>> engine = TokenizationEngine(VaultStore(MemoryStore()))
    >>> result = engine.tokenize("My age is 43.")
    >>> engine.detokenize(result.text).text
    'My age is 43.'
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from token_vault.config.settings import VaultSettings
from token_vault.core.errors import UnknownTokenError, VaultError
from token_vault.core.store import VaultStore
from token_vault.logging.setup import get_logger
from token_vault.metrics.collectors import DETOKENIZE_DURATION, TOKENIZE_DURATION
from token_vault.storage.factory import create_backend

logger = get_logger(__name__)


class UnknownTokenPolicy(str, Enum):
    """What detokenize does with tokens that are not in the vault."""

    DROP = "drop"  # leave them out of the output
    ERROR = "error"  # raise UnknownTokenError


@dataclass
class TokenizationResult:
    """Result of a tokenize call.

    Attributes:
        text: Tokens joined by single spaces.
        tokens: The tokens in input order.
        minted: Number of words that received a new token.
    """

    text: str
    tokens: list[str] = field(default_factory=list)
    minted: int = 0


@dataclass
class DetokenizationResult:
    """Result of a detokenize call.

    Attributes:
        text: Recovered words joined by single spaces.
        resolved_count: Number of tokens that were resolved.
        unresolved: Tokens with no word in the vault, in input order.
    """

    text: str
    resolved_count: int = 0
    unresolved: list[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """Check if every token was resolved."""
        return len(self.unresolved) == 0


class TokenizationEngine:
    """Forward and reverse word substitution over a VaultStore.

    Each call runs as one critical section under the store's AccessGuard,
    so lookups, mints and persists of one call never interleave with
    another call.

    Only the word sequence round-trips. Runs of whitespace collapse to a
    single space.
    """

    def __init__(
        self,
        store: VaultStore,
        unknown_tokens: UnknownTokenPolicy | str = UnknownTokenPolicy.DROP,
    ) -> None:
        """Initialize the engine.

        Args:
            store: The vault store to read and mint from.
            unknown_tokens: Policy for tokens detokenize cannot resolve.
        """
        self.store = store
        self.unknown_tokens = UnknownTokenPolicy(unknown_tokens)

    @classmethod
    def from_settings(cls, settings: Optional[VaultSettings] = None) -> "TokenizationEngine":
        """Open the configured backend and build an engine on it.

        Raises:
            StorageOpenError: If the backend cannot be opened or read. A
                backend that opened but could not be read is closed again.
        """
        settings = settings or VaultSettings.from_env()
        backend = create_backend(settings)
        try:
            store = VaultStore(backend, max_mint_attempts=settings.max_mint_attempts)
        except VaultError:
            backend.close()
            raise
        return cls(store, unknown_tokens=settings.unknown_tokens)

    def tokenize(self, text: str) -> TokenizationResult:
        """Replace every word in the text with its token.

        Args:
            text: Free text.

        Returns:
            TokenizationResult with the tokenized text.

        Raises:
            TokenSpaceExhausted: If a token could not be minted.
            StorageWriteError: If a new pair could not be persisted. Pairs
                persisted earlier in the same call stay assigned.
        """
        start = time.perf_counter()
        words = text.split()
        if not words:
            return TokenizationResult(text="")

        tokens: list[str] = []
        minted = 0

        with self.store.guard.exclusive():
            for word in words:
                token = self.store.lookup_token(word)
                if token is None:
                    token = self.store.token_for(word)
                    minted += 1
                tokens.append(token)

        TOKENIZE_DURATION.observe(time.perf_counter() - start)
        logger.debug(
            "Text tokenized",
            extra={"event": "tokenized", "word_count": len(words), "minted": minted},
        )

        return TokenizationResult(text=" ".join(tokens), tokens=tokens, minted=minted)

    def detokenize(self, text: str) -> DetokenizationResult:
        """Replace every token in the text with its original word.

        Args:
            text: Space-separated tokens.

        Returns:
            DetokenizationResult with the recovered text.

        Raises:
            UnknownTokenError: If the policy is ERROR and any token is unknown.
        """
        start = time.perf_counter()
        tokens = text.split()
        words: list[str] = []
        unresolved: list[str] = []

        with self.store.guard.exclusive():
            for token in tokens:
                word = self.store.lookup_word(token)
                if word is None:
                    unresolved.append(token)
                else:
                    words.append(word)

        DETOKENIZE_DURATION.observe(time.perf_counter() - start)

        if unresolved:
            logger.info(
                "Unknown tokens in detokenize input",
                extra={
                    "event": "unknown_tokens",
                    "unresolved": len(unresolved),
                    "policy": self.unknown_tokens.value,
                },
            )
            if self.unknown_tokens is UnknownTokenPolicy.ERROR:
                raise UnknownTokenError(len(unresolved))

        return DetokenizationResult(
            text=" ".join(words),
            resolved_count=len(words),
            unresolved=unresolved,
        )

    def close(self) -> None:
        """Close the underlying store."""
        self.store.close()
