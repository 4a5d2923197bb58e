"""Logging configuration module for token-vault."""

from token_vault.logging.setup import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
