"""
CLI Verify Command

Verify a proof JSON document against a trusted root checksum, without
the tree. Optionally check that the proof is for a given block.

Usage:
    merkle-audit verify proof.json --root HEX [--leaf BLOCK] [--json]

Exit codes:
    0  proof is valid
    1  runtime error (missing file, bad root hex, bad configuration)
    2  proof is invalid or malformed
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from merkle_audit.crypto.hashing import from_hex
from merkle_audit.merkle import MerkleVerifier, Proof
from merkle_audit.schemas.errors import MalformedProofException
from merkle_audit_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    get_config,
    get_hasher,
    wants_json,
)


logger = logging.getLogger(__name__)


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    proof_path: str = ""
    root: str = ""
    target: str = ""
    parts: int = 0
    algorithm: str = ""
    valid: bool = False
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["errors"]:
            del d["errors"]
        return d


def load_proof(path: str) -> Proof:
    """
    Read a proof document from a file ("-" reads stdin).

    Raises:
        FileNotFoundError: If the file does not exist
        MalformedProofException: If the document is not a valid proof
    """
    if path == "-":
        return Proof.from_json(sys.stdin.read())

    proof_path = Path(path)
    if not proof_path.exists():
        raise FileNotFoundError(f"Proof file not found: {proof_path}")
    return Proof.from_json(proof_path.read_text(encoding="utf-8"))


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"proof: {summary.proof_path}")
    print(f"root: {summary.root}")
    if summary.target:
        print(f"target: {summary.target}")
        print(f"parts: {summary.parts}")
    print(f"algorithm: {summary.algorithm}")
    print(f"valid: {str(summary.valid).lower()}")

    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors:
            print(f"  ✗ {err}")


def print_summary_json(summary: VerifySummary) -> None:
    """Print summary as JSON."""
    print(json.dumps(summary.to_dict(), indent=2))


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    try:
        root = from_hex(args.root)
    except ValueError as e:
        print(f"Error: Invalid root checksum: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    hasher = get_hasher(args)
    summary = VerifySummary(
        proof_path=args.proof,
        root=root.hex(),
        algorithm=get_config(args).runtime.hash.algorithm,
    )

    try:
        proof = load_proof(args.proof)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except MalformedProofException as e:
        summary.errors.append(e.message)
        proof = None

    if proof is not None:
        summary.target = proof.target.hex()
        summary.parts = len(proof)
        if args.leaf is not None:
            summary.valid = MerkleVerifier.verify_block_in_root(
                args.leaf.encode("utf-8"), proof, root, hasher
            )
            if not summary.valid:
                summary.errors.append("Proof does not show the given block under this root")
        else:
            summary.valid = MerkleVerifier.verify_against_root(root, hasher, proof)
            if not summary.valid:
                summary.errors.append("Proof does not fold to the given root")

    if wants_json(args):
        print_summary_json(summary)
    else:
        print_summary_human(summary)

    if summary.valid:
        logger.info("Verification passed")
        return EXIT_SUCCESS

    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
