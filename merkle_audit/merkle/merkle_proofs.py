"""
Merkle Proofs Convenience Wrappers
Thin wrappers around the tree functions for a cleaner API.

This module provides class-based interfaces:
- MerkleProver: Build trees and generate proofs
- MerkleVerifier: Verify proofs

These are convenience wrappers around the functions in merkle_tree.py.
"""
from __future__ import annotations

from typing import Sequence

from merkle_audit.crypto.hashing import ChecksumFunc, Hasher, as_hasher
from merkle_audit.merkle.merkle_tree import (
    MerkleTree,
    Proof,
    ProofStrategy,
    build_tree,
    create_proof,
    get_proof,
    verify_proof,
)


class MerkleProver:
    """
    Convenience class for generating Merkle proofs.

    Example:
        >>> from merkle_audit.crypto.hashing import sha256d
        >>> tree = MerkleProver.build(sha256d, [b"a", b"b", b"c"])
        >>> proof = MerkleProver.prove_block(tree, b"b")
        >>> MerkleVerifier.verify(tree, proof)
        True
    """

    @staticmethod
    def build(hash_fn: Hasher | ChecksumFunc, blocks: Sequence[bytes]) -> MerkleTree:
        """
        Build a tree from blocks.

        Raises:
            InvalidInputException: If blocks is empty
        """
        return build_tree(hash_fn, blocks)

    @staticmethod
    def prove(
        tree: MerkleTree,
        leaf_checksum: bytes,
        root_checksum: bytes | None = None,
        strategy: ProofStrategy = "index",
    ) -> Proof:
        """
        Generate a proof for a leaf checksum.

        With root_checksum the proof is bound to that root (get_proof),
        otherwise it is unbound (create_proof).

        Raises:
            NotFoundException: If no leaf has this checksum
            RootMismatchException: If root_checksum is given and differs from the tree's root
        """
        if root_checksum is not None:
            return get_proof(tree, root_checksum, leaf_checksum, strategy=strategy)
        return create_proof(tree, leaf_checksum, strategy=strategy)

    @staticmethod
    def prove_block(
        tree: MerkleTree,
        block: bytes,
        strategy: ProofStrategy = "index",
    ) -> Proof:
        """
        Generate a root-bound proof for a raw block.

        The block is hashed with the tree's own leaf hash first.
        """
        return get_proof(tree, tree.root_checksum, tree.leaf_checksum_of(block), strategy=strategy)

    @staticmethod
    def compute_root(hash_fn: Hasher | ChecksumFunc, blocks: Sequence[bytes]) -> bytes:
        """Root checksum of the tree built over blocks."""
        return build_tree(hash_fn, blocks).root_checksum


class MerkleVerifier:
    """
    Convenience class for verifying Merkle proofs.

    Verification returns a bool and never raises for tampered or
    malformed proofs.
    """

    @staticmethod
    def verify(tree: MerkleTree, proof: Proof) -> bool:
        """Verify a proof against a live tree."""
        return verify_proof(tree, None, proof)

    @staticmethod
    def verify_against_root(
        root_checksum: bytes,
        hash_fn: Hasher | ChecksumFunc,
        proof: Proof,
        expected_parts: int | None = None,
    ) -> bool:
        """Verify a standalone proof against a root checksum, without a tree."""
        return verify_proof(root_checksum, hash_fn, proof, expected_parts=expected_parts)

    @staticmethod
    def verify_block_in_root(
        block: bytes,
        proof: Proof,
        root_checksum: bytes,
        hash_fn: Hasher | ChecksumFunc,
    ) -> bool:
        """
        Verify that a raw block is the proof's target and folds to root_checksum.

        The block is leaf-hashed with hash_fn and must equal proof.target.
        """
        hasher = as_hasher(hash_fn)
        if not isinstance(block, (bytes, bytearray, memoryview)):
            return False
        if hasher.leaf(bytes(block)) != getattr(proof, "target", None):
            return False
        return verify_proof(root_checksum, hasher, proof)


__all__ = [
    "MerkleProver",
    "MerkleVerifier",
]
