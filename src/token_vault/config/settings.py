"""Runtime settings for token-vault.

Settings come from ``TOKEN_VAULT_*`` environment variables or from a YAML
file. Example YAML configuration:

    token_vault:
      backend: embedded        # memory, embedded, sql, redis
      path: ~/.token-vault/token_vault.db
      max_mint_attempts: 2
      unknown_tokens: drop     # drop or error
      port: 8080
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

BACKENDS = ("memory", "embedded", "sql", "redis")
UNKNOWN_TOKEN_POLICIES = ("drop", "error")


@dataclass
class VaultSettings:
    """Configuration for the vault service.

    Attributes:
        backend: Storage backend name.
        path: Database file for the embedded and sql backends.
        redis_url: Connection URL for the redis backend.
        max_mint_attempts: How many candidates to try before giving up on a token.
        unknown_tokens: What detokenize does with unknown tokens.
        host: HTTP bind address.
        port: HTTP port.
    """

    backend: str = "embedded"
    path: str = "token_vault.db"
    redis_url: str = "redis://localhost:6379/0"
    max_mint_attempts: int = 2
    unknown_tokens: str = "drop"
    host: str = "127.0.0.1"
    port: int = 8080

    def __post_init__(self) -> None:
        """Validate configuration values."""
        self.backend = self.backend.lower()
        self.unknown_tokens = self.unknown_tokens.lower()

        if self.backend not in BACKENDS:
            raise ValueError(f"backend must be one of {BACKENDS}, got: {self.backend}")
        if self.unknown_tokens not in UNKNOWN_TOKEN_POLICIES:
            raise ValueError(
                f"unknown_tokens must be one of {UNKNOWN_TOKEN_POLICIES}, got: {self.unknown_tokens}"
            )
        if self.max_mint_attempts < 1:
            raise ValueError(f"max_mint_attempts must be positive, got: {self.max_mint_attempts}")
        if not 1 <= self.port <= 65535:
            raise ValueError(f"port must be between 1 and 65535, got: {self.port}")
        if not self.path:
            raise ValueError("path cannot be empty")

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> "VaultSettings":
        """Build settings from ``TOKEN_VAULT_*`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Raises:
            ValueError: If a variable has an invalid value.
        """
        env = os.environ if environ is None else environ
        return cls(
            backend=env.get("TOKEN_VAULT_BACKEND", "embedded"),
            path=env.get("TOKEN_VAULT_PATH", "token_vault.db"),
            redis_url=env.get("TOKEN_VAULT_REDIS_URL", "redis://localhost:6379/0"),
            max_mint_attempts=_int_var(env, "TOKEN_VAULT_MINT_ATTEMPTS", 2),
            unknown_tokens=env.get("TOKEN_VAULT_UNKNOWN_TOKENS", "drop"),
            host=env.get("TOKEN_VAULT_HOST", "127.0.0.1"),
            port=_int_var(env, "TOKEN_VAULT_PORT", 8080),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VaultSettings":
        """Build settings from a plain dict, ignoring unknown keys."""
        if "token_vault" in data:
            data = data["token_vault"] or {}
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


def _int_var(env, name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {raw}") from None


def load_settings_from_yaml(path: Path | str) -> VaultSettings:
    """Load settings from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Validated VaultSettings. An empty file yields the defaults.

    Raises:
        FileNotFoundError: If the configuration file doesn't exist.
        ValueError: If the YAML structure or a value is invalid.
        yaml.YAMLError: If the YAML is malformed.
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return VaultSettings()

    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML structure: expected dict, got {type(data).__name__}")

    return VaultSettings.from_dict(data)
