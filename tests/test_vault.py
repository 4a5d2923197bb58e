"""Unit tests for the Vault mapping."""

import json

import pytest

from token_vault.core.errors import DeserializationError, MappingConflictError
from token_vault.core.vault import Vault


class TestVault:
    """Tests for Vault class."""

    def test_add_and_lookup(self):
        """Test adding a pair and looking it up both ways."""
        vault = Vault()
        vault.add("alice", "tok_alice_000001")

        assert vault.get_token("alice") == "tok_alice_000001"
        assert vault.get_word("tok_alice_000001") == "alice"

    def test_get_nonexistent(self):
        """Test lookups that miss."""
        vault = Vault()
        vault.add("alice", "tok_alice_000001")

        assert vault.get_token("bob") is None
        assert vault.get_word("tok_bob_00000001") is None

    def test_add_identical_pair_is_noop(self):
        """Re-adding the same pair does not grow the vault."""
        vault = Vault()
        vault.add("alice", "tok_alice_000001")
        vault.add("alice", "tok_alice_000001")

        assert len(vault) == 1

    def test_token_reuse_rejected(self):
        """A live token cannot be given to a second word."""
        vault = Vault()
        vault.add("alice", "tok_shared_00001")

        with pytest.raises(MappingConflictError):
            vault.add("bob", "tok_shared_00001")
        assert vault.get_token("bob") is None
        assert vault.get_word("tok_shared_00001") == "alice"

    def test_second_token_for_word_rejected(self):
        """A word keeps its first token."""
        vault = Vault()
        vault.add("alice", "tok_alice_000001")

        with pytest.raises(MappingConflictError):
            vault.add("alice", "tok_alice_000002")
        assert vault.get_token("alice") == "tok_alice_000001"
        assert not vault.has_token("tok_alice_000002")

    def test_words_are_not_normalized(self):
        """Case and punctuation make different words."""
        vault = Vault()
        vault.add("Alice", "tok_upper_000001")
        vault.add("alice", "tok_lower_000001")
        vault.add("alice.", "tok_punct_000001")

        assert len(vault) == 3

    def test_copy_is_independent(self):
        """Changes to a copy do not leak into the original."""
        vault = Vault()
        vault.add("alice", "tok_alice_000001")

        clone = vault.copy()
        clone.add("bob", "tok_bob_00000001")

        assert "bob" not in vault
        assert "bob" in clone
        assert len(vault) == 1

    def test_is_consistent(self):
        """A vault built through add() is always a bijection."""
        vault = Vault()
        for i in range(50):
            vault.add(f"word{i}", f"token{i:011d}")
        assert vault.is_consistent()


class TestVaultSerialization:
    """Tests for the persisted record format."""

    def test_to_dict(self):
        """Both maps and the schema version are serialized."""
        vault = Vault()
        vault.add("alice", "tok_alice_000001")

        data = vault.to_dict()
        assert data["version"] == 1
        assert data["word_to_token"] == {"alice": "tok_alice_000001"}
        assert data["token_to_word"] == {"tok_alice_000001": "alice"}

    def test_json_keeps_unicode(self):
        """Non-ASCII words are stored as-is."""
        vault = Vault()
        vault.add("Zürich", "tok_zurich_00001")

        json_str = vault.to_json()
        assert "Zürich" in json_str
        assert Vault.from_json(json_str).get_token("Zürich") == "tok_zurich_00001"

    def test_from_json_bytes(self):
        """Byte payloads (as returned by Redis) are accepted."""
        vault = Vault()
        vault.add("alice", "tok_alice_000001")

        restored = Vault.from_json(vault.to_json().encode("utf-8"))
        assert restored == vault

    def test_unknown_keys_ignored(self):
        """Records written by a newer version still load."""
        record = {
            "version": 2,
            "word_to_token": {"alice": "tok_alice_000001"},
            "token_to_word": {"tok_alice_000001": "alice"},
            "created_by": "future",
        }
        restored = Vault.from_dict(record)
        assert restored.get_word("tok_alice_000001") == "alice"

    def test_forward_map_only(self):
        """The reverse map is rebuilt when absent."""
        restored = Vault.from_dict({"word_to_token": {"alice": "tok_alice_000001"}})
        assert restored.get_word("tok_alice_000001") == "alice"

    @pytest.mark.parametrize(
        "payload",
        [
            "not json at all",
            "[1, 2, 3]",
            '{"word_to_token": ["alice"]}',
            '{"word_to_token": {"alice": 42}}',
            '{"word_to_token": {"a": "dup_token_000001", "b": "dup_token_000001"}}',
            '{"word_to_token": {"a": "tok_a_0000000001"}, "token_to_word": {"tok_x": "a"}}',
        ],
    )
    def test_invalid_records(self, payload):
        """Malformed or non-bijective records raise DeserializationError."""
        with pytest.raises(DeserializationError):
            Vault.from_json(payload)

    def test_invalid_utf8(self):
        """Undecodable bytes raise DeserializationError."""
        with pytest.raises(DeserializationError):
            Vault.from_json(b"\xff\xfe\xfd")

    def test_round_trip_preserves_equality(self):
        """A vault equals its own deserialized copy."""
        vault = Vault()
        vault.add("alice", "tok_alice_000001")
        vault.add("bob", "tok_bob_00000001")

        assert Vault.from_json(vault.to_json()) == vault
        assert json.loads(vault.to_json())["word_to_token"]["bob"] == "tok_bob_00000001"
