"""Prometheus metrics collectors for token-vault.

Defines all application metrics for monitoring and observability.
"""

from prometheus_client import Counter, Gauge, Histogram

# Request metrics
REQUEST_LATENCY = Histogram(
    "token_vault_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint", "status"],
    buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

REQUEST_COUNT = Counter(
    "token_vault_requests_total",
    "Total request count",
    ["method", "endpoint", "status"],
)

ACTIVE_REQUESTS = Gauge(
    "token_vault_active_requests",
    "Currently processing requests",
)

# Token minting
TOKENS_MINTED = Counter(
    "token_vault_tokens_minted_total",
    "Tokens assigned to previously unseen words",
)

TOKEN_COLLISIONS = Counter(
    "token_vault_token_collisions_total",
    "Minted candidates rejected because the token was already live",
)

MINT_EXHAUSTED = Counter(
    "token_vault_mint_exhausted_total",
    "Mint calls that ran out of retry attempts",
)

# Vault storage
VAULT_SIZE = Gauge(
    "token_vault_vault_size",
    "Number of word/token pairs in the vault",
)

STORAGE_WRITE_ERRORS = Counter(
    "token_vault_storage_write_errors_total",
    "Failed persist operations",
    ["backend"],
)

# Local processing latency
TOKENIZE_DURATION = Histogram(
    "token_vault_tokenize_duration_seconds",
    "Tokenize call latency, including persistence",
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 1.0],
)

DETOKENIZE_DURATION = Histogram(
    "token_vault_detokenize_duration_seconds",
    "Detokenize call latency",
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1],
)

GUARD_WAIT_DURATION = Histogram(
    "token_vault_guard_wait_seconds",
    "Time spent waiting to acquire the vault guard",
    buckets=[0.0001, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
)
