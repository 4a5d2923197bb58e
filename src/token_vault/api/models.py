"""
Pydantic models for the token-vault HTTP API.
"""

from pydantic import BaseModel, Field


class TokenizationRequest(BaseModel):
    """Request body for /tokenize."""

    input: str = Field(..., description="Free text to tokenize")


class TokenizationResponse(BaseModel):
    """Response body for /tokenize."""

    tokenized: str = Field(..., description="Space-separated tokens, one per input word")


class DetokenizationRequest(BaseModel):
    """Request body for /detokenize."""

    input: str = Field(..., description="Space-separated tokens")


class DetokenizationResponse(BaseModel):
    """Response body for /detokenize."""

    detokenized: str = Field(..., description="Recovered words; unknown tokens are dropped")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str
    vault_size: int = 0
