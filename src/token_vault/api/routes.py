"""
FastAPI routes for the token-vault service.

Handlers are plain ``def`` functions so FastAPI runs them in its worker
threadpool; each one blocks on the vault's AccessGuard like any other
thread.
"""

import threading
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from token_vault import __version__
from token_vault.api.middleware import RequestLoggingMiddleware
from token_vault.api.models import (
    DetokenizationRequest,
    DetokenizationResponse,
    HealthResponse,
    TokenizationRequest,
    TokenizationResponse,
)
from token_vault.config.settings import VaultSettings
from token_vault.core.engine import TokenizationEngine
from token_vault.core.errors import VaultError
from token_vault.logging.setup import get_logger

logger = get_logger(__name__)


# Global engine instance
_engine: Optional[TokenizationEngine] = None
_engine_lock = threading.Lock()
_settings: Optional[VaultSettings] = None


def configure(settings: VaultSettings) -> None:
    """Use these settings instead of the environment when the engine is created."""
    global _settings
    _settings = settings


def get_engine() -> TokenizationEngine:
    """Get or create the tokenization engine.

    Raises:
        StorageOpenError: If the configured backend cannot be opened.
    """
    global _engine

    with _engine_lock:
        if _engine is None:
            settings = _settings or VaultSettings.from_env()
            _engine = TokenizationEngine.from_settings(settings)
            logger.info(
                "Vault engine ready",
                extra={
                    "event": "engine_ready",
                    "backend": settings.backend,
                    "entries": _engine.store.size,
                },
            )
        return _engine


def close_engine() -> None:
    """Close and forget the engine, if one was created."""
    global _engine

    with _engine_lock:
        if _engine is not None:
            _engine.close()
            _engine = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the vault at startup and close it at shutdown.

    A backend that cannot be opened aborts startup.
    """
    logger.info("Starting token-vault service", extra={"version": __version__})
    get_engine()
    yield
    logger.info("Shutting down token-vault service")
    close_engine()


app = FastAPI(
    title="token-vault",
    description="Reversible word tokenization backed by a persisted vault",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(VaultError)
async def vault_error_handler(request: Request, exc: VaultError):
    """Report vault failures as a bare server error.

    Storage details stay in the server log.
    """
    logger.error(
        "Vault operation failed",
        extra={"event": "vault_error", "error_type": type(exc).__name__},
    )
    return Response(status_code=500)


@app.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check(engine: TokenizationEngine = Depends(get_engine)):
    """Health check endpoint."""
    return HealthResponse(status="ok", version=__version__, vault_size=engine.store.size)


@app.get("/metrics", tags=["Monitoring"])
def metrics():
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )


@app.post("/tokenize", response_model=TokenizationResponse, tags=["Vault"])
def tokenize(
    body: TokenizationRequest,
    engine: TokenizationEngine = Depends(get_engine),
):
    """Replace each word of the input with its token."""
    result = engine.tokenize(body.input)
    return TokenizationResponse(tokenized=result.text)


@app.post("/detokenize", response_model=DetokenizationResponse, tags=["Vault"])
def detokenize(
    body: DetokenizationRequest,
    engine: TokenizationEngine = Depends(get_engine),
):
    """Replace each token of the input with its original word."""
    result = engine.detokenize(body.input)
    return DetokenizationResponse(detokenized=result.text)
