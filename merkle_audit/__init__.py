"""
merkle-audit: binary hash trees with audit proofs.

Build a Merkle tree over an ordered list of blocks, generate compact
audit proofs that a block is included under a root, and verify those
proofs without the tree.
"""

__version__ = "0.1.0"

from merkle_audit.crypto.hashing import Hasher, get_hasher, tagged
from merkle_audit.merkle import (
    MerkleProver,
    MerkleTree,
    MerkleVerifier,
    Proof,
    ProofPart,
    build_tree,
    compute_root,
    create_proof,
    get_proof,
    render_proof,
    render_tree,
    verify_proof,
)
from merkle_audit.schemas.errors import (
    InvalidInputException,
    MalformedProofException,
    MerkleAuditException,
    NotFoundException,
    RootMismatchException,
)

__all__ = [
    "Hasher",
    "get_hasher",
    "tagged",
    "MerkleProver",
    "MerkleTree",
    "MerkleVerifier",
    "Proof",
    "ProofPart",
    "build_tree",
    "compute_root",
    "create_proof",
    "get_proof",
    "render_proof",
    "render_tree",
    "verify_proof",
    "InvalidInputException",
    "MalformedProofException",
    "MerkleAuditException",
    "NotFoundException",
    "RootMismatchException",
]
