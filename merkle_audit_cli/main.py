"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    merkle-audit tree BLOCK... | --file PATH [--json]
    merkle-audit root BLOCK... | --file PATH [--json]
    merkle-audit prove BLOCK... | --file PATH --leaf BLOCK [--root HEX] [--strategy index|pointer] [--out PATH] [--json]
    merkle-audit verify PROOF_JSON --root HEX [--leaf BLOCK] [--json]
    merkle-audit demo
    merkle-audit config --init|--show

Environment Variables:
    MERKLE_AUDIT_HASH_ALGORITHM     Digest: sha256, sha256d, sha3_256, blake2b, identity
    MERKLE_AUDIT_DOMAIN_SEPARATION  Prefix leaf/branch tags (default: true)
    MERKLE_AUDIT_PROOF_STRATEGY     index or pointer (default: index)
    MERKLE_AUDIT_HEX_WIDTH          Hex characters shown per checksum (0 = full)
    MERKLE_AUDIT_LOG_LEVEL          Log level (default: WARNING)
    MERKLE_AUDIT_OUTPUT_FORMAT      human or json (default: human)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from merkle_audit.crypto.hashing import DIGESTS
from merkle_audit.merkle import PROOF_STRATEGIES
from merkle_audit_cli import __version__
from merkle_audit_cli.commands import prove, tree, verify
from merkle_audit_cli.commands.common import EXIT_RUNTIME_ERROR, EXIT_SUCCESS
from merkle_audit_cli.config import apply_cli_overrides, get_default_config_template, load_config


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _add_block_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "blocks",
        nargs="*",
        help="Blocks as UTF-8 strings, in order",
    )
    parser.add_argument(
        "--file", "-f",
        type=str,
        default=None,
        help="Read blocks from a file, one per line (- for stdin)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="merkle-audit",
        description="Build Merkle trees, generate audit proofs and verify them.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./merkle-audit.json or ~/.config/merkle-audit/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--algorithm",
        type=str,
        default=None,
        choices=sorted(DIGESTS),
        help="Hash algorithm (overrides config)",
    )
    parser.add_argument(
        "--no-domain-separation",
        action="store_true",
        default=False,
        help="Hash leaves and branches without tag prefixes",
    )
    parser.add_argument(
        "--hex-width",
        type=int,
        default=None,
        help="Hex characters shown per checksum in rendered output (0 = full)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on errors",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- tree command ---
    tree_parser = subparsers.add_parser(
        "tree",
        help="Build a tree and print it",
        description="Build a Merkle tree from blocks and print its nested form.",
    )
    _add_block_arguments(tree_parser)
    tree_parser.set_defaults(func=tree.tree_cmd)

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        help="Print the root checksum of a tree",
        description="Build a Merkle tree from blocks and print its root checksum as hex.",
    )
    _add_block_arguments(root_parser)
    root_parser.set_defaults(func=tree.root_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Generate an audit proof for a block",
        description="Build a Merkle tree from blocks and emit the proof that one block is included.",
    )
    _add_block_arguments(prove_parser)
    prove_parser.add_argument(
        "--leaf", "-l",
        type=str,
        required=True,
        help="Block to prove (UTF-8 string)",
    )
    prove_parser.add_argument(
        "--root", "-r",
        type=str,
        default=None,
        help="Expected root checksum (hex); generation fails if the tree's root differs",
    )
    prove_parser.add_argument(
        "--strategy",
        type=str,
        choices=list(PROOF_STRATEGIES),
        default=None,
        help="Proof path strategy (default: from config or index)",
    )
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the proof JSON to this file",
    )
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a proof against a root checksum",
        description="Verify a proof JSON document offline against a trusted root checksum.",
    )
    verify_parser.add_argument(
        "proof",
        type=str,
        help="Path to proof JSON (- for stdin)",
    )
    verify_parser.add_argument(
        "--root", "-r",
        type=str,
        required=True,
        help="Trusted root checksum (hex)",
    )
    verify_parser.add_argument(
        "--leaf", "-l",
        type=str,
        default=None,
        help="Also require the proof to be for this block (UTF-8 string)",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- demo command ---
    demo_parser = subparsers.add_parser(
        "demo",
        help="Show a worked example",
        description="Print a six-block tree and one audit path using the identity hash.",
    )
    demo_parser.set_defaults(func=tree.demo_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="merkle-audit.json",
        help="Path for config file (default: merkle-audit.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (MERKLE_AUDIT_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: merkle-audit config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = apply_cli_overrides(load_config(args.config), args)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
