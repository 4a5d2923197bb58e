"""Core modules for word tokenization and detokenization."""

from token_vault.core.errors import (
    DeserializationError,
    MappingConflictError,
    StorageOpenError,
    StorageWriteError,
    TokenSpaceExhausted,
    UnknownTokenError,
    VaultError,
)
from token_vault.core.generator import TokenGenerator
from token_vault.core.vault import Vault
from token_vault.core.guard import AccessGuard
from token_vault.core.store import VaultStore
from token_vault.core.engine import (
    DetokenizationResult,
    TokenizationEngine,
    TokenizationResult,
    UnknownTokenPolicy,
)

__all__ = [
    "TokenGenerator",
    "Vault",
    "AccessGuard",
    "VaultStore",
    "TokenizationEngine",
    "TokenizationResult",
    "DetokenizationResult",
    "UnknownTokenPolicy",
    # Errors
    "VaultError",
    "StorageOpenError",
    "StorageWriteError",
    "TokenSpaceExhausted",
    "MappingConflictError",
    "UnknownTokenError",
    "DeserializationError",
]
