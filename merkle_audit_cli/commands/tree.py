"""
CLI Tree Commands

Build a tree from blocks and show it:
- tree: rendered nested form
- root: root checksum only
- demo: fixed six-block example with the identity hash

Usage:
    merkle-audit tree alpha beta kappa [--json]
    merkle-audit root --file blocks.txt [--json]
    merkle-audit demo
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace

from merkle_audit.crypto.hashing import as_text, identity
from merkle_audit.merkle import MerkleProver, MerkleTree, build_tree, render_proof, render_tree
from merkle_audit_cli.commands.common import (
    EXIT_SUCCESS,
    get_config,
    get_formatter,
    get_hasher,
    read_blocks,
    wants_json,
)


logger = logging.getLogger(__name__)

DEMO_BLOCKS = [b"alpha", b"beta", b"kappa", b"gamma", b"epsilon", b"omega"]
DEMO_LEAF = b"omega"


def _build(args: Namespace) -> MerkleTree:
    hasher = get_hasher(args)
    blocks = read_blocks(args)
    logger.info(f"Building tree over {len(blocks)} block(s) with {hasher.name or 'custom'} hash")
    return build_tree(hasher, blocks)


def tree_summary(tree: MerkleTree, algorithm: str) -> dict:
    """JSON-friendly description of a tree."""
    return {
        "algorithm": algorithm,
        "leaves": tree.leaf_count,
        "levels": tree.levels,
        "root": tree.root_checksum.hex(),
        "rows": [[checksum.hex() for checksum in tree.row_checksums(level)] for level in range(tree.levels)],
    }


def tree_cmd(args: Namespace) -> int:
    """Print the rendered tree."""
    tree = _build(args)

    if wants_json(args):
        algorithm = get_config(args).runtime.hash.algorithm
        print(json.dumps(tree_summary(tree, algorithm), indent=2))
    else:
        print(render_tree(tree, get_formatter(args)).lstrip("\n"))
    return EXIT_SUCCESS


def root_cmd(args: Namespace) -> int:
    """Print the root checksum as hex."""
    tree = _build(args)

    if wants_json(args):
        summary = tree_summary(tree, get_config(args).runtime.hash.algorithm)
        del summary["rows"]
        print(json.dumps(summary, indent=2))
    else:
        print(tree.root_checksum.hex())
    return EXIT_SUCCESS


def demo_cmd(args: Namespace) -> int:
    """Print the six-block example tree and the audit path for its last block."""
    tree = MerkleProver.build(identity, DEMO_BLOCKS)
    proof = MerkleProver.prove_block(tree, DEMO_LEAF)

    print("blocks: " + ", ".join(block.decode() for block in DEMO_BLOCKS))
    print("hash: identity (checksums are the concatenated blocks)")
    print()
    print(render_tree(tree, as_text).lstrip("\n"))
    print()
    print(render_proof(proof, identity, as_text))
    return EXIT_SUCCESS
