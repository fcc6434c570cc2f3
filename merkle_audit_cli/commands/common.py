"""
Helpers shared by the CLI commands: block input, hasher and formatter
selection from the loaded configuration.
"""

from __future__ import annotations

import sys
from argparse import Namespace
from pathlib import Path
from typing import Callable

from merkle_audit.crypto.hashing import Hasher, as_text
from merkle_audit.schemas.errors import InvalidInputException
from merkle_audit_cli.config import CLIConfig


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def get_config(args: Namespace) -> CLIConfig:
    """Config attached by main(), or defaults when a command runs standalone."""
    return getattr(args, "cli_config", None) or CLIConfig()


def read_blocks(args: Namespace) -> list[bytes]:
    """
    Collect blocks from positional arguments or --file.

    Each argument, or each line of the file ("-" reads stdin), is one
    block, UTF-8 encoded. Order is preserved.
    """
    path = getattr(args, "file", None)
    if path and args.blocks:
        raise InvalidInputException("Pass blocks either as arguments or with --file, not both")

    if path:
        if path == "-":
            text = sys.stdin.read()
        else:
            file_path = Path(path)
            if not file_path.exists():
                raise FileNotFoundError(f"Block file not found: {file_path}")
            text = file_path.read_text(encoding="utf-8")
        lines = text.splitlines()
    else:
        lines = list(args.blocks or [])

    if not lines:
        raise InvalidInputException("No blocks given")

    return [line.encode("utf-8") for line in lines]


def get_hasher(args: Namespace) -> Hasher:
    return get_config(args).runtime.hasher()


def get_formatter(args: Namespace) -> Callable[[bytes], str]:
    """Checksum formatter; the identity digest is shown as text."""
    runtime = get_config(args).runtime
    if runtime.hash.algorithm == "identity" and not runtime.hash.domain_separation:
        return as_text
    return runtime.display.formatter()


def wants_json(args: Namespace) -> bool:
    return bool(getattr(args, "json", False)) or get_config(args).default_output_format == "json"
