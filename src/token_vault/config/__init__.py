"""Configuration module for token-vault."""

from token_vault.config.settings import (
    BACKENDS,
    VaultSettings,
    load_settings_from_yaml,
)

__all__ = [
    "BACKENDS",
    "VaultSettings",
    "load_settings_from_yaml",
]
