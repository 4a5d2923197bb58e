"""Prometheus metrics module for token-vault."""

from token_vault.metrics.collectors import (
    ACTIVE_REQUESTS,
    DETOKENIZE_DURATION,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    STORAGE_WRITE_ERRORS,
    TOKENIZE_DURATION,
    TOKENS_MINTED,
    VAULT_SIZE,
)

__all__ = [
    "REQUEST_LATENCY",
    "REQUEST_COUNT",
    "ACTIVE_REQUESTS",
    "TOKENS_MINTED",
    "VAULT_SIZE",
    "STORAGE_WRITE_ERRORS",
    "TOKENIZE_DURATION",
    "DETOKENIZE_DURATION",
]
