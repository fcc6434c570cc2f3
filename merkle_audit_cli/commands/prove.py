"""
CLI Prove Command

Build a tree from blocks and emit the audit proof for one of them.
The proof is always bound to a root: the one given with --root, or
the tree's own root otherwise.

Usage:
    merkle-audit prove alpha beta kappa --leaf beta [--root HEX] [--strategy pointer] [--out proof.json] [--json]
"""

from __future__ import annotations

import logging
from argparse import Namespace
from pathlib import Path

from merkle_audit.crypto.hashing import from_hex
from merkle_audit.merkle import MerkleProver, render_proof
from merkle_audit_cli.commands.common import (
    EXIT_SUCCESS,
    get_config,
    get_formatter,
    get_hasher,
    read_blocks,
    wants_json,
)


logger = logging.getLogger(__name__)


def prove_cmd(args: Namespace) -> int:
    """
    Execute the prove command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    hasher = get_hasher(args)
    blocks = read_blocks(args)
    strategy = args.strategy or get_config(args).runtime.proof.strategy

    tree = MerkleProver.build(hasher, blocks)
    root = from_hex(args.root) if args.root else tree.root_checksum
    leaf = tree.leaf_checksum_of(args.leaf.encode("utf-8"))

    proof = MerkleProver.prove(tree, leaf, root_checksum=root, strategy=strategy)
    logger.info(f"Generated {strategy} proof with {len(proof)} part(s)")

    document = proof.to_json()
    if args.out:
        out_path = Path(args.out)
        out_path.write_text(document + "\n", encoding="utf-8")
        logger.info(f"Wrote proof to {out_path}")

    if wants_json(args):
        if not args.out:
            print(document)
        return EXIT_SUCCESS

    print(render_proof(proof, hasher, get_formatter(args)))
    print()
    print(f"root: {tree.root_checksum.hex()}")
    if args.out:
        print(f"proof: {args.out}")
    else:
        print(f"proof: {document}")
    return EXIT_SUCCESS
