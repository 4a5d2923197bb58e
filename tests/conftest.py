"""Pytest fixtures and configuration."""

import os

import pytest

# Keep the API from touching the working directory when it opens a vault
os.environ.setdefault("TOKEN_VAULT_BACKEND", "memory")

from token_vault.core.engine import TokenizationEngine
from token_vault.core.generator import TokenGenerator
from token_vault.core.store import VaultStore
from token_vault.storage.memory_store import MemoryStore


class SequenceGenerator(TokenGenerator):
    """Generator that hands out a fixed sequence of tokens."""

    def __init__(self, tokens):
        super().__init__()
        self._tokens = iter(tokens)
        self.calls = 0

    def mint(self) -> str:
        self.calls += 1
        return next(self._tokens)


@pytest.fixture
def memory_backend():
    """An empty in-memory backend."""
    return MemoryStore()


@pytest.fixture
def store(memory_backend):
    """A VaultStore on an empty in-memory backend."""
    return VaultStore(memory_backend)


@pytest.fixture
def engine(store):
    """A tokenization engine with the default drop policy."""
    return TokenizationEngine(store)


@pytest.fixture
def sample_texts():
    """Sample texts for testing."""
    return {
        "age": "My age is 43.",
        "card": "card 4111111111111111 exp 12/29",
        "repeated": "spam spam eggs spam",
        "unicode": "José paid 10€ in Zürich 😊",
        "empty": "",
        "whitespace": "   \n\t  ",
    }
