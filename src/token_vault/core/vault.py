"""
Vault Mapping

Holds the bidirectional word <-> token relation and its serialized form.
The vault itself does no locking; VaultStore owns the live instance and
replaces it wholesale after each successful persist.
"""

import json
from typing import Optional

from token_vault.core.errors import DeserializationError, MappingConflictError

SCHEMA_VERSION = 1


class Vault:
    """Bidirectional mapping between words and tokens.

    Both directions are kept as plain dicts so that lookups are O(1).
    ``add`` refuses any pair that would make the two maps disagree.

    Example:
        >>> vault = Vault()
        >>> vault.add("alice", "q1Vx3_eTzR0aQmPb")
        >>> vault.get_token("alice")
        'q1Vx3_eTzR0aQmPb'
        >>> vault.get_word("q1Vx3_eTzR0aQmPb")
        'alice'
    """

    __slots__ = ("_word_to_token", "_token_to_word")

    def __init__(self) -> None:
        self._word_to_token: dict[str, str] = {}
        self._token_to_word: dict[str, str] = {}

    def add(self, word: str, token: str) -> None:
        """Add a word/token pair.

        Re-adding an identical pair is a no-op.

        Args:
            word: The original word.
            token: The token that stands in for it.

        Raises:
            MappingConflictError: If the word already has a different token
                or the token already belongs to a different word.
        """
        existing_token = self._word_to_token.get(word)
        existing_word = self._token_to_word.get(token)

        if existing_token == token and existing_word == word:
            return
        if existing_token is not None:
            raise MappingConflictError("Word is already mapped to another token")
        if existing_word is not None:
            raise MappingConflictError("Token is already assigned to another word")

        self._word_to_token[word] = token
        self._token_to_word[token] = word

    def get_token(self, word: str) -> Optional[str]:
        """Return the token for a word, or None."""
        return self._word_to_token.get(word)

    def get_word(self, token: str) -> Optional[str]:
        """Return the word for a token, or None."""
        return self._token_to_word.get(token)

    def has_token(self, token: str) -> bool:
        return token in self._token_to_word

    def copy(self) -> "Vault":
        """Return an independent copy of this vault."""
        clone = Vault()
        clone._word_to_token = dict(self._word_to_token)
        clone._token_to_word = dict(self._token_to_word)
        return clone

    def is_consistent(self) -> bool:
        """Check that the two maps describe the same one-to-one relation."""
        if len(self._word_to_token) != len(self._token_to_word):
            return False
        return all(
            self._token_to_word.get(token) == word
            for word, token in self._word_to_token.items()
        )

    def to_dict(self) -> dict:
        """Serialize the vault to a dictionary.

        Returns:
            Dictionary with both maps and a schema version.
        """
        return {
            "version": SCHEMA_VERSION,
            "word_to_token": dict(self._word_to_token),
            "token_to_word": dict(self._token_to_word),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Vault":
        """Rebuild a vault from ``to_dict`` output.

        Unknown keys are ignored. Only ``word_to_token`` is required;
        ``token_to_word`` is checked against it when present.

        Raises:
            DeserializationError: If the data is malformed or the two maps
                are not a bijection.
        """
        if not isinstance(data, dict):
            raise DeserializationError(
                f"Invalid vault record: expected dict, got {type(data).__name__}"
            )

        forward = data.get("word_to_token", {})
        reverse = data.get("token_to_word")
        if not isinstance(forward, dict) or not (reverse is None or isinstance(reverse, dict)):
            raise DeserializationError("Invalid vault record: mappings must be objects")

        vault = cls()
        try:
            for word, token in forward.items():
                if not isinstance(word, str) or not isinstance(token, str):
                    raise DeserializationError("Invalid vault record: non-string entry")
                vault.add(word, token)
        except MappingConflictError as e:
            raise DeserializationError(f"Invalid vault record: {e}") from e

        if reverse is not None and reverse != vault._token_to_word:
            raise DeserializationError("Invalid vault record: mappings disagree")

        return vault

    def to_json(self) -> str:
        """Serialize to a JSON string."""
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, json_str: str | bytes) -> "Vault":
        """Deserialize from a JSON string.

        Raises:
            DeserializationError: If the payload is not a valid vault record.
        """
        if isinstance(json_str, bytes):
            try:
                json_str = json_str.decode("utf-8")
            except UnicodeDecodeError as e:
                raise DeserializationError(f"Invalid vault record encoding: {e}") from e
        try:
            data = json.loads(json_str)
        except ValueError as e:
            raise DeserializationError(f"Invalid vault JSON: {e}") from e
        return cls.from_dict(data)

    def __len__(self) -> int:
        return len(self._token_to_word)

    def __contains__(self, word: str) -> bool:
        return word in self._word_to_token

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vault):
            return NotImplemented
        return self._word_to_token == other._word_to_token

    def __repr__(self) -> str:
        return f"Vault(entries={len(self)})"
