"""
Embedded single-record storage backed by SQLite.

The whole vault is serialized to JSON and stored under one fixed key.
Each write is its own transaction with ``synchronous=FULL``, so a
successful return means the record has been flushed to disk.
"""

import sqlite3
from pathlib import Path
from typing import Optional

from token_vault.core.errors import StorageOpenError, StorageWriteError
from token_vault.core.vault import Vault
from token_vault.storage.base import VaultBackend

RECORD_KEY = "vault"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS vault_records (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


def connect_sqlite(path: str | Path, schema: str) -> sqlite3.Connection:
    """Open a SQLite database for durable writes and apply a schema.

    Args:
        path: Database file path. ``~`` is expanded and parent
            directories are created.
        schema: SQL script run once after connecting.

    Raises:
        StorageOpenError: If the file or schema cannot be opened.
    """
    db_path = Path(path).expanduser()
    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        db = sqlite3.connect(str(db_path), check_same_thread=False)
        db.execute("PRAGMA synchronous=FULL")
        db.executescript(schema)
    except (OSError, sqlite3.Error) as e:
        raise StorageOpenError(f"Cannot open vault database at {db_path}: {e}") from e
    return db


class EmbeddedStore(VaultBackend):
    """Single-record vault store in a local SQLite file.

    Example:
        >>> store = EmbeddedStore("~/.token-vault/token_vault.db")
        >>> vault = store.read()  # None on first run
    """

    name = "embedded"

    def __init__(self, path: str | Path = "token_vault.db") -> None:
        self.path = Path(path).expanduser()
        self._db = connect_sqlite(self.path, _SCHEMA)

    def read(self) -> Optional[Vault]:
        try:
            row = self._db.execute(
                "SELECT value FROM vault_records WHERE key = ?",
                (RECORD_KEY,),
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageOpenError(f"Cannot read vault record: {e}") from e

        if row is None:
            return None
        return Vault.from_json(row[0])

    def upsert(self, token: str, word: str, staged: Vault) -> None:
        try:
            with self._db:
                self._db.execute(
                    "INSERT INTO vault_records (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                    (RECORD_KEY, staged.to_json()),
                )
        except UnicodeEncodeError:
            raise StorageWriteError("Cannot persist vault record: a word is not valid UTF-8") from None
        except sqlite3.Error as e:
            raise StorageWriteError(f"Cannot persist vault record: {e}") from e

    def close(self) -> None:
        self._db.close()

    def __repr__(self) -> str:
        return f"EmbeddedStore(path={str(self.path)!r})"
