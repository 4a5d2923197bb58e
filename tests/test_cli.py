"""Tests for the token-vault command line interface."""

import io
import json
from unittest.mock import patch

import pytest

from token_vault.cli import DEMO_TEXT, build_parser, main


@pytest.fixture
def vault_args(tmp_path):
    """Global options pointing at a throwaway embedded vault."""
    return ["--backend", "embedded", "--path", str(tmp_path / "cli.db")]


class TestCliCommands:
    """Tests for the CLI subcommands."""

    def test_demo(self, capsys):
        """The demo prints the original, tokenized and recovered text."""
        assert main(["--backend", "memory", "demo"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == f"Original: {DEMO_TEXT}"
        assert lines[1].startswith("Tokenized: ")
        assert len(lines[1].split(" ")) == 5
        assert lines[2] == f"Retrieved: {DEMO_TEXT}"

    def test_tokenize_then_detokenize(self, capsys, vault_args):
        """Tokens from one invocation resolve in the next."""
        assert main(vault_args + ["tokenize", "hello vault"]) == 0
        tokenized = capsys.readouterr().out.strip()

        assert main(vault_args + ["detokenize", tokenized]) == 0
        assert capsys.readouterr().out.strip() == "hello vault"

    def test_tokenize_from_stdin(self, capsys, vault_args):
        """Text is read from stdin when no argument is given."""
        with patch("sys.stdin", io.StringIO("from stdin\n")):
            assert main(vault_args + ["tokenize"]) == 0

        assert len(capsys.readouterr().out.split()) == 2

    def test_stats(self, capsys, vault_args):
        """Stats report the backend and vault size."""
        main(vault_args + ["tokenize", "a b c a"])
        capsys.readouterr()

        assert main(vault_args + ["stats"]) == 0
        stats = json.loads(capsys.readouterr().out)
        assert stats == {"backend": "embedded", "vault_size": 3}

    def test_strict_unknown_tokens(self, capsys, vault_args):
        """Unknown tokens fail under the error policy without leaking input."""
        code = main(vault_args + ["--unknown-tokens", "error", "detokenize", "AAAAAAAAAAAAAAAA"])

        assert code == 1
        captured = capsys.readouterr()
        assert "UnknownTokenError" in captured.err
        assert "AAAAAAAAAAAAAAAA" not in captured.err

    def test_unencodable_argument(self, capsys, vault_args):
        """A non-UTF-8 argument exits with status 1 instead of a traceback."""
        # argv bytes b"caf\xe9" decode to this under surrogateescape
        code = main(vault_args + ["tokenize", "caf\udce9"])

        assert code == 1
        assert "Vault error: StorageWriteError" in capsys.readouterr().err

    def test_unopenable_vault(self, capsys, tmp_path):
        """An unopenable vault exits with status 1."""
        blocker = tmp_path / "blocker"
        blocker.write_text("file")

        code = main(["--backend", "sql", "--path", str(blocker / "x.db"), "stats"])

        assert code == 1
        assert "Cannot open vault" in capsys.readouterr().err


class TestCliConfig:
    """Tests for CLI configuration handling."""

    def test_config_file(self, capsys, tmp_path):
        """Settings can come from a YAML file."""
        config = tmp_path / "vault.yaml"
        config.write_text(f"token_vault:\n  backend: sql\n  path: {tmp_path / 'cfg.db'}\n")

        assert main(["--config", str(config), "stats"]) == 0
        assert json.loads(capsys.readouterr().out)["backend"] == "sql"

    def test_flags_override_config(self, capsys, tmp_path):
        """Command line flags win over the file."""
        config = tmp_path / "vault.yaml"
        config.write_text("backend: sql\n")

        assert main(["--config", str(config), "--backend", "memory", "stats"]) == 0
        assert json.loads(capsys.readouterr().out)["backend"] == "memory"

    def test_missing_config(self, capsys, tmp_path):
        """A missing config file exits with status 2."""
        assert main(["--config", str(tmp_path / "nope.yaml"), "stats"]) == 2
        assert "Configuration error" in capsys.readouterr().err

    def test_invalid_backend_flag(self):
        """Unknown backends are rejected by the parser."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--backend", "sled", "demo"])

    def test_serve_uses_settings(self, vault_args):
        """Serve hands the configured app to uvicorn."""
        with patch("token_vault.cli.uvicorn.run") as mock_run, patch(
            "token_vault.api.routes.configure"
        ) as mock_configure:
            assert main(vault_args + ["serve", "--port", "9999"]) == 0

        settings = mock_configure.call_args[0][0]
        assert settings.backend == "embedded"
        assert mock_run.call_args[1]["port"] == 9999
        assert mock_run.call_args[1]["host"] == "127.0.0.1"
