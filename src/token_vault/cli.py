"""Command line interface for token-vault.

Usage:
    # Tokenize text (argument or stdin)
    token-vault tokenize "My age is 43."

    # Reverse it
    echo 'q1Vx3_eTzR0aQmPb ...' | token-vault detokenize

    # Demonstration round trip
    token-vault demo

    # Run the HTTP server
    token-vault serve --port 8080

All state is persisted in the configured backend, so the vault survives
across calls.
"""

from __future__ import annotations
import argparse
import json
import sys
from dataclasses import replace
from typing import Optional

import uvicorn

from token_vault.config.settings import (
    BACKENDS,
    UNKNOWN_TOKEN_POLICIES,
    VaultSettings,
    load_settings_from_yaml,
)
from token_vault.core.engine import TokenizationEngine
from token_vault.core.errors import VaultError
from token_vault.logging.setup import get_logger, setup_logging

logger = get_logger(__name__)

DEMO_TEXT = "My age is 43."


def _settings_from_args(args: argparse.Namespace) -> VaultSettings:
    if args.config:
        settings = load_settings_from_yaml(args.config)
    else:
        settings = VaultSettings.from_env()
    overrides = {
        "backend": args.backend,
        "path": args.path,
        "unknown_tokens": args.unknown_tokens,
    }
    return replace(settings, **{k: v for k, v in overrides.items() if v is not None})


def _read_text(args: argparse.Namespace) -> str:
    return args.text if args.text is not None else sys.stdin.read()


def cmd_tokenize(engine: TokenizationEngine, args: argparse.Namespace) -> None:
    """Tokenize text from the argument or stdin."""
    sys.stdout.write(engine.tokenize(_read_text(args)).text + "\n")


def cmd_detokenize(engine: TokenizationEngine, args: argparse.Namespace) -> None:
    """Detokenize text from the argument or stdin."""
    sys.stdout.write(engine.detokenize(_read_text(args)).text + "\n")


def cmd_demo(engine: TokenizationEngine, args: argparse.Namespace) -> None:
    """Tokenize a sample sentence and recover it again."""
    tokenized = engine.tokenize(DEMO_TEXT)
    retrieved = engine.detokenize(tokenized.text)
    sys.stdout.write(f"Original: {DEMO_TEXT}\n")
    sys.stdout.write(f"Tokenized: {tokenized.text}\n")
    sys.stdout.write(f"Retrieved: {retrieved.text}\n")


def cmd_stats(engine: TokenizationEngine, args: argparse.Namespace) -> None:
    """Print vault statistics as JSON."""
    json.dump(
        {"backend": engine.store.backend.name, "vault_size": engine.store.size},
        sys.stdout,
    )
    sys.stdout.write("\n")


def cmd_serve(settings: VaultSettings, args: argparse.Namespace) -> None:
    """Run the HTTP server with these settings."""
    from token_vault.api.routes import app, configure

    configure(settings)
    uvicorn.run(app, host=args.host or settings.host, port=args.port or settings.port)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="token-vault",
        description="Reversible word tokenization",
    )
    parser.add_argument("--config", default=None, help="YAML settings file")
    parser.add_argument("--backend", choices=BACKENDS, default=None, help="Storage backend")
    parser.add_argument("--path", default=None, help="Vault database path")
    parser.add_argument(
        "--unknown-tokens",
        choices=UNKNOWN_TOKEN_POLICIES,
        default=None,
        help="Detokenize policy for unknown tokens",
    )
    parser.add_argument("--log-level", default="WARNING", help="Log level")

    sub = parser.add_subparsers(dest="command", required=True)
    for name, help_text in (
        ("tokenize", "Tokenize text (argument or stdin)"),
        ("detokenize", "Detokenize text (argument or stdin)"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("text", nargs="?", default=None)
    sub.add_parser("demo", help="Tokenize and recover a sample sentence")
    sub.add_parser("stats", help="Show vault size")
    serve = sub.add_parser("serve", help="Run the HTTP server")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(level=args.log_level.upper(), json_format=False)

    try:
        settings = _settings_from_args(args)
    except (ValueError, FileNotFoundError) as e:
        sys.stderr.write(f"Configuration error: {e}\n")
        return 2

    if args.command == "serve":
        cmd_serve(settings, args)
        return 0

    cmds = {
        "tokenize": cmd_tokenize,
        "detokenize": cmd_detokenize,
        "demo": cmd_demo,
        "stats": cmd_stats,
    }

    try:
        engine = TokenizationEngine.from_settings(settings)
    except VaultError as e:
        sys.stderr.write(f"Cannot open vault: {e}\n")
        return 1

    try:
        cmds[args.command](engine, args)
    except VaultError as e:
        logger.error("Vault operation failed", extra={"event": "vault_error"})
        sys.stderr.write(f"Vault error: {type(e).__name__}\n")
        return 1
    finally:
        engine.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
