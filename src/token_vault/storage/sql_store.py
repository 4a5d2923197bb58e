"""
Relational storage: one row per token.

Unlike the single-record stores, each assignment writes only the new row.
The upsert uses SQLite's own ``ON CONFLICT ... DO UPDATE`` clause.
"""

import sqlite3
from pathlib import Path
from typing import Optional

from token_vault.core.errors import (
    DeserializationError,
    MappingConflictError,
    StorageOpenError,
    StorageWriteError,
)
from token_vault.core.vault import Vault
from token_vault.storage.base import VaultBackend
from token_vault.storage.embedded_store import connect_sqlite

_SCHEMA = """
CREATE TABLE IF NOT EXISTS token_vault (
    token TEXT PRIMARY KEY,
    word TEXT NOT NULL UNIQUE,
    created_at REAL NOT NULL DEFAULT (julianday('now'))
);
"""

_UPSERT = (
    "INSERT INTO token_vault (token, word) VALUES (?, ?) "
    "ON CONFLICT(token) DO UPDATE SET word = excluded.word"
)


class SqlStore(VaultBackend):
    """Token table in a SQLite database.

    The ``UNIQUE`` constraint on ``word`` keeps one token per word at the
    storage level: a second token for the same word is rejected by the
    database as well as by the in-memory vault.
    """

    name = "sql"

    def __init__(self, path: str | Path = "token_vault.db") -> None:
        self.path = Path(path).expanduser()
        self._db = connect_sqlite(self.path, _SCHEMA)

    def read(self) -> Optional[Vault]:
        try:
            rows = self._db.execute("SELECT word, token FROM token_vault").fetchall()
        except sqlite3.Error as e:
            raise StorageOpenError(f"Cannot read token table: {e}") from e

        if not rows:
            return None

        vault = Vault()
        for word, token in rows:
            try:
                vault.add(word, token)
            except MappingConflictError as e:
                raise DeserializationError(f"Inconsistent token table: {e}") from e
        return vault

    def upsert(self, token: str, word: str, staged: Vault) -> None:
        try:
            with self._db:
                self._db.execute(_UPSERT, (token, word))
        except UnicodeEncodeError:
            raise StorageWriteError("Cannot upsert token row: word is not valid UTF-8") from None
        except sqlite3.Error as e:
            raise StorageWriteError(f"Cannot upsert token row: {e}") from e

    def close(self) -> None:
        self._db.close()

    def __repr__(self) -> str:
        return f"SqlStore(path={str(self.path)!r})"
