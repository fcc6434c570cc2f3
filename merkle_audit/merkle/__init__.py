"""
Merkle Tree and Audit Proofs
Tree construction + audit proof generation/verification.

This module provides:
- MerkleTree / build_tree: build a tree from an ordered list of blocks
- Proof / ProofPart: self-contained audit proofs
- create_proof / get_proof: audit path for a leaf (optionally root-bound)
- verify_proof / compute_root: recompute and compare the root
- render_tree / render_proof: human-readable output

Construction Rules:
1. Leaf hashing: hasher.leaf(block)
2. Branch hashing: hasher.branch(left, right)
3. Padding: an unmatched last node is paired with itself at every level
4. Empty input: rejected with InvalidInputException

Usage:
    from merkle_audit.crypto import get_hasher
    from merkle_audit.merkle import build_tree, get_proof, verify_proof

    hasher = get_hasher("sha256d")
    tree = build_tree(hasher, [b"alpha", b"beta", b"kappa"])

    leaf = hasher.leaf(b"beta")
    proof = get_proof(tree, tree.root_checksum, leaf)

    assert verify_proof(tree.root_checksum, hasher, proof)
"""
from .nodes import (
    Branch,
    Leaf,
    Node,
    NodeTable,
)

from .merkle_tree import (
    PROOF_STRATEGIES,
    MerkleTree,
    Proof,
    ProofPart,
    build_tree,
    check_proof_shape,
    compute_root,
    compute_tree_depth,
    create_proof,
    get_proof,
    verify_proof,
)

from .merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
)

from .printing import (
    render_proof,
    render_tree,
)


__all__ = [
    # Nodes
    "Branch",
    "Leaf",
    "Node",
    "NodeTable",
    # Core types
    "MerkleTree",
    "Proof",
    "ProofPart",
    "PROOF_STRATEGIES",
    # Core functions
    "build_tree",
    "compute_tree_depth",
    "create_proof",
    "get_proof",
    "check_proof_shape",
    "compute_root",
    "verify_proof",
    # Display
    "render_tree",
    "render_proof",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
