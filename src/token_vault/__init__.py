"""
token-vault: reversible word tokenization

Replaces each word of free text with a random, collision-checked token and
keeps a persisted bidirectional mapping so the substitution can be reversed.
"""

__version__ = "0.1.0"

from token_vault.core.engine import (
    DetokenizationResult,
    TokenizationEngine,
    TokenizationResult,
)
from token_vault.core.store import VaultStore
from token_vault.core.vault import Vault

__all__ = [
    "TokenizationEngine",
    "TokenizationResult",
    "DetokenizationResult",
    "VaultStore",
    "Vault",
]
