"""
token-vault Server Entry Point

Run with: python -m token_vault.main
Or: uvicorn token_vault.api.routes:app
"""

import os
import sys
from typing import Optional

import uvicorn

from token_vault import __version__
from token_vault.config.settings import BACKENDS, UNKNOWN_TOKEN_POLICIES
from token_vault.logging.setup import get_logger, setup_logging

logger = get_logger(__name__)


def validate_environment(environ: Optional[dict[str, str]] = None) -> list[str]:
    """Validate environment variables at startup.

    Returns:
        List of validation error messages (empty if all valid).
    """
    env = os.environ if environ is None else environ
    errors = []

    port_str = env.get("TOKEN_VAULT_PORT", "8080")
    try:
        port = int(port_str)
        if not (1 <= port <= 65535):
            errors.append(f"TOKEN_VAULT_PORT must be between 1 and 65535, got: {port}")
    except ValueError:
        errors.append(f"TOKEN_VAULT_PORT must be an integer, got: {port_str}")

    attempts_str = env.get("TOKEN_VAULT_MINT_ATTEMPTS", "2")
    try:
        attempts = int(attempts_str)
        if attempts < 1:
            errors.append(f"TOKEN_VAULT_MINT_ATTEMPTS must be positive, got: {attempts}")
    except ValueError:
        errors.append(f"TOKEN_VAULT_MINT_ATTEMPTS must be an integer, got: {attempts_str}")

    backend = env.get("TOKEN_VAULT_BACKEND", "embedded").lower()
    if backend not in BACKENDS:
        errors.append(f"TOKEN_VAULT_BACKEND must be one of {BACKENDS}, got: {backend}")

    policy = env.get("TOKEN_VAULT_UNKNOWN_TOKENS", "drop").lower()
    if policy not in UNKNOWN_TOKEN_POLICIES:
        errors.append(
            f"TOKEN_VAULT_UNKNOWN_TOKENS must be one of {UNKNOWN_TOKEN_POLICIES}, got: {policy}"
        )

    valid_log_levels = {"debug", "info", "warning", "error", "critical"}
    log_level = env.get("TOKEN_VAULT_LOG_LEVEL", "info").lower()
    if log_level not in valid_log_levels:
        errors.append(f"TOKEN_VAULT_LOG_LEVEL must be one of {valid_log_levels}, got: {log_level}")

    return errors


def main():
    """Run the token-vault server."""
    setup_logging()

    validation_errors = validate_environment()
    if validation_errors:
        for error in validation_errors:
            logger.error(error, extra={"event": "config_error"})
        print("\nConfiguration errors detected:", file=sys.stderr)
        for error in validation_errors:
            print(f"  - {error}", file=sys.stderr)
        print("\nPlease fix the above errors and restart.", file=sys.stderr)
        sys.exit(1)

    host = os.getenv("TOKEN_VAULT_HOST", "127.0.0.1")
    port = int(os.getenv("TOKEN_VAULT_PORT", "8080"))
    log_level = os.getenv("TOKEN_VAULT_LOG_LEVEL", "info").lower()

    logger.info(
        "Starting token-vault server",
        extra={
            "event": "server_starting",
            "host": host,
            "port": port,
            "backend": os.getenv("TOKEN_VAULT_BACKEND", "embedded"),
            "version": __version__,
        },
    )

    uvicorn.run(
        "token_vault.api.routes:app",
        host=host,
        port=port,
        log_level=log_level,
    )


if __name__ == "__main__":
    main()
