"""
Vault error taxonomy.

Every failure the vault can report derives from VaultError so that
transport adapters can translate them into a single generic failure.
Messages never include the words being protected.
"""


class VaultError(Exception):
    """Base class for all token vault errors."""


class StorageOpenError(VaultError):
    """The storage backend could not be opened or connected."""


class StorageWriteError(VaultError):
    """A persist operation failed. In-memory state was not modified."""


class TokenSpaceExhausted(VaultError):
    """No free token was found within the mint retry limit."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"No unused token found after {attempts} attempts")
        self.attempts = attempts


class MappingConflictError(VaultError):
    """An assignment would break the one-to-one word/token relation."""


class UnknownTokenError(VaultError):
    """Strict detokenization met tokens that are not in the vault."""

    def __init__(self, unresolved_count: int) -> None:
        super().__init__(f"{unresolved_count} token(s) could not be resolved")
        self.unresolved_count = unresolved_count


class DeserializationError(VaultError):
    """A persisted vault record could not be parsed."""
