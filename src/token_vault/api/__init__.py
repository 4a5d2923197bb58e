"""HTTP API module for the token-vault service."""

from token_vault.api.routes import app, get_engine
from token_vault.api.models import (
    DetokenizationRequest,
    DetokenizationResponse,
    TokenizationRequest,
    TokenizationResponse,
)

__all__ = [
    "app",
    "get_engine",
    "TokenizationRequest",
    "TokenizationResponse",
    "DetokenizationRequest",
    "DetokenizationResponse",
]
