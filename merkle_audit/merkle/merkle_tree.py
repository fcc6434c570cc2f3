"""
Merkle Tree Implementation
Deterministic tree construction, audit proof generation, and verification.

This module provides:
- build_tree: construct a MerkleTree from an ordered list of blocks
- create_proof / get_proof: audit path from a leaf to the root
- compute_root / verify_proof: recompute a root from a proof and compare
- compute_tree_depth: number of rows for a given leaf count

Construction Rules:
1. Leaf checksum: hasher.leaf(block)
2. Branch checksum: hasher.branch(left.checksum, right.checksum)
3. Padding rule: an unmatched last node at any level is paired with itself
4. Empty input is rejected (InvalidInputException)
5. Single block: root = branch(leaf, leaf)

Proof Rules:
- Parts are ordered leaf to root; a tree with L rows yields L - 1 parts
- is_right=True folds running + sibling, is_right=False folds sibling + running
- Verification never raises on garbled proofs, it returns False

Determinism Notes:
- Leaf order is the caller's order; nothing is sorted
- Same blocks + same hasher always give the same root and the same proofs
"""
from __future__ import annotations

import hmac
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Literal, Sequence

from pydantic import ValidationError

from merkle_audit.crypto.hashing import ChecksumFunc, Hasher, as_hasher
from merkle_audit.merkle.nodes import Branch, Node, NodeTable
from merkle_audit.merkle.printing import render_proof, render_tree
from merkle_audit.schemas.canonical import dumps_canonical
from merkle_audit.schemas.errors import (
    InvalidInputException,
    MalformedProofException,
    NotFoundException,
    RootMismatchException,
)
from merkle_audit.schemas.proof import ProofDocument, ProofPartDocument


logger = logging.getLogger(__name__)

ProofStrategy = Literal["index", "pointer"]
PROOF_STRATEGIES: tuple[str, ...] = ("index", "pointer")


# =============================================================================
# Proof Types
# =============================================================================


@dataclass(frozen=True)
class ProofPart:
    """
    One step of an audit path.

    Attributes:
        is_right: True if the sibling goes to the right of the running hash
        checksum: The sibling's checksum
    """
    is_right: bool
    checksum: bytes


@dataclass(frozen=True)
class Proof:
    """
    An audit proof that a leaf is included under a root.

    Self-contained: verifying it needs only the proof, the hash function
    and the root to compare against, not the tree.

    Attributes:
        parts: Audit path, leaf-adjacent part first
        target: Checksum of the leaf being proven
        root: Root checksum the proof was bound to by get_proof, if any
    """
    parts: tuple[ProofPart, ...]
    target: bytes
    root: bytes | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.parts, tuple):
            object.__setattr__(self, "parts", tuple(self.parts))

    def __len__(self) -> int:
        return len(self.parts)

    def to_document(self) -> ProofDocument:
        """Convert to the hex-encoded wire model."""
        return ProofDocument(
            target=self.target.hex(),
            parts=[
                ProofPartDocument(is_right=part.is_right, checksum=part.checksum.hex())
                for part in self.parts
            ],
            root=self.root.hex() if self.root is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Plain dict of the wire model (hex checksums)."""
        return self.to_document().model_dump(mode="json", exclude_none=True)

    def to_json(self) -> str:
        """Canonical JSON (sorted keys, no whitespace)."""
        return dumps_canonical(self.to_document())

    @classmethod
    def from_document(cls, document: ProofDocument) -> Proof:
        """Decode a validated wire model."""
        return cls(
            parts=tuple(
                ProofPart(is_right=part.is_right, checksum=bytes.fromhex(part.checksum))
                for part in document.parts
            ),
            target=bytes.fromhex(document.target),
            root=bytes.fromhex(document.root) if document.root is not None else None,
        )

    @classmethod
    def from_dict(cls, data: Any) -> Proof:
        """
        Decode a proof from its dict form.

        Raises:
            MalformedProofException: If the document does not validate
        """
        try:
            document = ProofDocument.model_validate(data)
        except ValidationError as e:
            raise MalformedProofException(
                f"Invalid proof document: {e.error_count()} validation error(s)",
                details={"errors": [err["msg"] for err in e.errors()]},
            ) from e
        return cls.from_document(document)

    @classmethod
    def from_json(cls, text: str | bytes) -> Proof:
        """
        Decode a proof from JSON text.

        Raises:
            MalformedProofException: If the text is not JSON or does not validate
        """
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as e:
            raise MalformedProofException(f"Proof is not valid JSON: {e}") from e
        return cls.from_dict(data)

    def to_string(self, hash_fn: Hasher | ChecksumFunc, fmt: Callable[[bytes], str]) -> str:
        """Render the audit path as "left + right = parent" lines."""
        return render_proof(self, hash_fn, fmt)


# =============================================================================
# Builder
# =============================================================================


def compute_tree_depth(num_leaves: int) -> int:
    """
    Number of rows (leaf row included) for a tree with num_leaves leaves.

    levels = ceil(log2(n rounded up to even)) + 1, so a single leaf still
    gets a root branch above it.

    Args:
        num_leaves: Number of leaves in the tree

    Returns:
        Row count (0 for an empty tree)
    """
    if num_leaves <= 0:
        return 0
    padded = num_leaves + num_leaves % 2
    return (padded - 1).bit_length() + 1


class MerkleTree:
    """
    A binary hash tree built once from an ordered list of blocks.

    The tree is read-only after construction. Nodes live in a flat table;
    rows hold node ids, rows[0] being the leaves in insertion order and
    rows[-1] the single root.

    Example:
        >>> from merkle_audit.crypto.hashing import identity
        >>> tree = MerkleTree.build(identity, [b"alpha", b"beta", b"kappa"])
        >>> tree.root_checksum
        b'alphabetakappakappa'
    """

    def __init__(
        self,
        hasher: Hasher,
        nodes: tuple[Node, ...],
        rows: tuple[tuple[int, ...], ...],
    ) -> None:
        self._hasher = hasher
        self._nodes = nodes
        self._rows = rows
        self._leaf_index: dict[bytes, int] = {}
        for index, node_id in enumerate(rows[0]):
            self._leaf_index.setdefault(nodes[node_id].checksum, index)

    @classmethod
    def build(cls, hash_fn: Hasher | ChecksumFunc, blocks: Sequence[bytes]) -> MerkleTree:
        """Alias for build_tree()."""
        return build_tree(hash_fn, blocks)

    # -- structure -----------------------------------------------------------

    @property
    def hasher(self) -> Hasher:
        return self._hasher

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._nodes

    @property
    def rows(self) -> tuple[tuple[int, ...], ...]:
        return self._rows

    @property
    def levels(self) -> int:
        """Row count, leaf row included."""
        return len(self._rows)

    @property
    def root_id(self) -> int:
        return self._rows[-1][0]

    @property
    def root(self) -> Node:
        return self._nodes[self.root_id]

    @property
    def root_checksum(self) -> bytes:
        return self.root.checksum

    @property
    def leaf_count(self) -> int:
        return len(self._rows[0])

    @property
    def leaves(self) -> tuple[bytes, ...]:
        """Leaf checksums in insertion order."""
        return self.row_checksums(0)

    @property
    def blocks(self) -> tuple[bytes, ...]:
        """Source blocks in insertion order."""
        return tuple(self._nodes[node_id].block for node_id in self._rows[0])

    def __len__(self) -> int:
        return self.leaf_count

    def __contains__(self, leaf_checksum: object) -> bool:
        return isinstance(leaf_checksum, bytes) and leaf_checksum in self._leaf_index

    def node(self, node_id: int) -> Node:
        return self._nodes[node_id]

    def row_checksums(self, level: int) -> tuple[bytes, ...]:
        """Checksums of one row, left to right."""
        return tuple(self._nodes[node_id].checksum for node_id in self._rows[level])

    def index_of(self, leaf_checksum: bytes) -> int | None:
        """Position of the first leaf with this checksum, or None."""
        return self._leaf_index.get(leaf_checksum)

    def leaf_checksum_of(self, block: bytes) -> bytes:
        """Checksum a block would have as a leaf of this tree."""
        return self._hasher.leaf(bytes(block))

    # -- proofs --------------------------------------------------------------

    def create_proof(self, leaf_checksum: bytes, strategy: ProofStrategy = "index") -> Proof:
        """See create_proof()."""
        return create_proof(self, leaf_checksum, strategy=strategy)

    def get_proof(
        self,
        root_checksum: bytes,
        leaf_checksum: bytes,
        strategy: ProofStrategy = "index",
    ) -> Proof:
        """See get_proof()."""
        return get_proof(self, root_checksum, leaf_checksum, strategy=strategy)

    def verify_proof(self, proof: Proof) -> bool:
        """
        Check a proof against this tree.

        False if the target is not one of this tree's leaves, if the proof
        has the wrong shape, or if it does not fold to this tree's root.
        """
        return verify_proof(self, None, proof)

    # -- display -------------------------------------------------------------

    def to_string(self, fmt: Callable[[bytes], str], indent: int = 0) -> str:
        """Render the tree as nested (B root: ...) / (L root: ...) forms."""
        return render_tree(self, fmt, indent)

    def __repr__(self) -> str:
        return (
            f"MerkleTree(leaves={self.leaf_count}, levels={self.levels}, "
            f"root={self.root_checksum.hex()[:16]})"
        )


def build_tree(hash_fn: Hasher | ChecksumFunc, blocks: Sequence[bytes]) -> MerkleTree:
    """
    Build a Merkle tree bottom-up from an ordered list of blocks.

    Algorithm:
    1. Hash each block into a leaf (row 0)
    2. For each following row, pair adjacent nodes left to right;
       an unmatched last node is paired with itself
    3. Stop after compute_tree_depth(len(blocks)) rows; the last row
       holds only the root

    Example: [a, b, c] -> [a, b, c] / [ab, cc] / [abcc]

    Args:
        hash_fn: Hasher, or a plain one-argument digest
        blocks: Block bytes; order is preserved

    Returns:
        The built MerkleTree

    Raises:
        InvalidInputException: If blocks is empty or contains non-bytes items
    """
    hasher = as_hasher(hash_fn)

    if isinstance(blocks, (bytes, bytearray, memoryview, str)):
        raise InvalidInputException(
            "blocks must be a sequence of byte strings, not a single value",
            details={"type": type(blocks).__name__},
        )
    blocks = list(blocks)
    if not blocks:
        raise InvalidInputException("Cannot build a Merkle tree from an empty block list")

    for i, block in enumerate(blocks):
        if not isinstance(block, (bytes, bytearray, memoryview)):
            raise InvalidInputException(
                f"Block {i} is not bytes",
                details={"index": i, "type": type(block).__name__},
            )

    levels = compute_tree_depth(len(blocks))
    table = NodeTable()

    leaf_row: list[int] = []
    for block in blocks:
        data = bytes(block)
        leaf_row.append(table.add_leaf(hasher.leaf(data), data))

    rows: list[tuple[int, ...]] = [tuple(leaf_row)]

    for _ in range(1, levels):
        prev = rows[-1]
        row: list[int] = []
        for j in range(0, len(prev), 2):
            left = prev[j]
            # unmatched last node is its own sibling
            right = prev[j + 1] if j + 1 < len(prev) else left
            checksum = hasher.branch(table[left].checksum, table[right].checksum)
            row.append(table.add_branch(checksum, left, right))
        rows.append(tuple(row))

    if len(rows[-1]) != 1:
        raise RuntimeError(f"Tree construction ended with {len(rows[-1])} roots")

    tree = MerkleTree(hasher=hasher, nodes=table.seal(), rows=tuple(rows))
    logger.debug(
        f"Built Merkle tree: leaves={tree.leaf_count} levels={tree.levels} "
        f"root={tree.root_checksum.hex()}"
    )
    return tree


# =============================================================================
# Proof Generator
# =============================================================================


def _path_by_index(tree: MerkleTree, index: int) -> list[ProofPart]:
    """Walk rows bottom-up by position."""
    parts: list[ProofPart] = []
    for level in range(tree.levels - 1):
        row = tree.rows[level]
        if index % 2 == 1:
            sibling = row[index - 1]
            parts.append(ProofPart(is_right=False, checksum=tree.node(sibling).checksum))
        else:
            sibling = row[index + 1] if index + 1 < len(row) else row[index]
            parts.append(ProofPart(is_right=True, checksum=tree.node(sibling).checksum))
        index //= 2
    return parts


def _path_by_parent(tree: MerkleTree, index: int) -> list[ProofPart]:
    """Walk parent links from the leaf until a node has no parent."""
    parts: list[ProofPart] = []
    current = tree.rows[0][index]
    parent_id = tree.node(current).parent
    while parent_id is not None:
        parent = tree.node(parent_id)
        if not isinstance(parent, Branch):
            raise TypeError(f"Node {parent_id} is a parent but not a branch")
        if parent.left == current:
            parts.append(ProofPart(is_right=True, checksum=tree.node(parent.right).checksum))
        else:
            parts.append(ProofPart(is_right=False, checksum=tree.node(parent.left).checksum))
        current = parent_id
        parent_id = parent.parent
    return parts


_PATH_BUILDERS: dict[str, Callable[[MerkleTree, int], list[ProofPart]]] = {
    "index": _path_by_index,
    "pointer": _path_by_parent,
}


def create_proof(
    tree: MerkleTree,
    leaf_checksum: bytes,
    strategy: ProofStrategy = "index",
) -> Proof:
    """
    Generate the audit path for a leaf.

    Both strategies give the same proof:
    - "index": position arithmetic over the rows
    - "pointer": follow parent links from the leaf to the root

    Args:
        tree: The tree to prove against
        leaf_checksum: Checksum of the target leaf
        strategy: "index" or "pointer"

    Returns:
        Proof with levels - 1 parts and no bound root

    Raises:
        NotFoundException: If no leaf has this checksum
        InvalidInputException: If the strategy is unknown
    """
    try:
        build_path = _PATH_BUILDERS[strategy]
    except KeyError:
        raise InvalidInputException(
            f"Unknown proof strategy: {strategy}",
            details={"supported": list(PROOF_STRATEGIES)},
        ) from None

    index = tree.index_of(leaf_checksum) if isinstance(leaf_checksum, bytes) else None
    if index is None:
        raise NotFoundException(
            "Target leaf not found in tree",
            leaf_checksum=leaf_checksum if isinstance(leaf_checksum, bytes) else None,
        )

    parts = build_path(tree, index)
    logger.debug(f"Created {strategy} proof for leaf {index} with {len(parts)} parts")
    return Proof(parts=tuple(parts), target=leaf_checksum)


def get_proof(
    tree: MerkleTree,
    root_checksum: bytes,
    leaf_checksum: bytes,
    strategy: ProofStrategy = "index",
) -> Proof:
    """
    Generate an audit path bound to an expected root.

    The root is checked before the leaf is searched for.

    Raises:
        RootMismatchException: If root_checksum is not the tree's root
        NotFoundException: If no leaf has this checksum
    """
    actual = tree.root_checksum
    if not isinstance(root_checksum, bytes) or not hmac.compare_digest(root_checksum, actual):
        raise RootMismatchException(
            "Root checksums don't match",
            expected_root=root_checksum if isinstance(root_checksum, bytes) else None,
            actual_root=actual,
        )

    proof = create_proof(tree, leaf_checksum, strategy=strategy)
    return Proof(parts=proof.parts, target=proof.target, root=actual)


# =============================================================================
# Proof Verifier
# =============================================================================


def check_proof_shape(
    proof: Proof,
    expected_parts: int | None = None,
    checksum_size: int | None = None,
) -> None:
    """
    Validate the structure of a proof without hashing anything.

    Args:
        proof: Proof to check
        expected_parts: Required number of parts, if known
        checksum_size: Required length of every checksum, if known

    Raises:
        MalformedProofException: On the first structural problem found
    """
    if not isinstance(proof, Proof):
        raise MalformedProofException(f"Expected a Proof, got {type(proof).__name__}")

    if not isinstance(proof.target, bytes) or not proof.target:
        raise MalformedProofException("Proof target must be non-empty bytes")
    if checksum_size is not None and len(proof.target) != checksum_size:
        raise MalformedProofException(
            f"Proof target has length {len(proof.target)}, expected {checksum_size}"
        )

    if proof.root is not None and not isinstance(proof.root, bytes):
        raise MalformedProofException("Proof root must be bytes")

    if expected_parts is not None and len(proof.parts) != expected_parts:
        raise MalformedProofException(
            f"Proof has {len(proof.parts)} parts, expected {expected_parts}",
            details={"parts": len(proof.parts), "expected": expected_parts},
        )

    for i, part in enumerate(proof.parts):
        if not isinstance(part, ProofPart):
            raise MalformedProofException("Proof part is not a ProofPart", part_index=i)
        if not isinstance(part.is_right, bool):
            raise MalformedProofException("Proof part orientation must be a bool", part_index=i)
        if not isinstance(part.checksum, bytes) or not part.checksum:
            raise MalformedProofException("Proof part checksum must be non-empty bytes", part_index=i)
        if checksum_size is not None and len(part.checksum) != checksum_size:
            raise MalformedProofException(
                f"Proof part checksum has length {len(part.checksum)}, expected {checksum_size}",
                part_index=i,
            )


def compute_root(hash_fn: Hasher | ChecksumFunc, proof: Proof) -> bytes:
    """
    Fold a proof into the root it implies.

    running = target
    for each part: running = branch(running, sibling) if is_right
                   else branch(sibling, running)

    Args:
        hash_fn: Same hasher the tree was built with
        proof: Proof to fold

    Returns:
        The implied root checksum
    """
    hasher = as_hasher(hash_fn)
    running = proof.target
    for part in proof.parts:
        if part.is_right:
            running = hasher.branch(running, part.checksum)
        else:
            running = hasher.branch(part.checksum, running)
    return running


def verify_proof(
    tree_or_root: MerkleTree | bytes,
    hash_fn: Hasher | ChecksumFunc | None,
    proof: Proof,
    expected_parts: int | None = None,
) -> bool:
    """
    Verify an audit proof.

    Given a tree, the target must be one of its leaves and the proof must
    have exactly levels - 1 parts; hash_fn defaults to the tree's hasher.
    Given a bare root checksum only root equality matters.

    A proof bound to a different root than the one checked against fails,
    as does a part that puts a copy of the running checksum on the left.

    Args:
        tree_or_root: MerkleTree or root checksum bytes
        hash_fn: Hasher used to build the tree (optional with a tree)
        proof: Proof to verify
        expected_parts: Required part count when verifying against a bare root

    Returns:
        True if the proof folds to the root, False otherwise (never raises
        for malformed or tampered proofs)
    """
    if isinstance(tree_or_root, MerkleTree):
        tree = tree_or_root
        hasher = as_hasher(hash_fn) if hash_fn is not None else tree.hasher
        root = tree.root_checksum
        target = getattr(proof, "target", None)
        if not isinstance(target, bytes) or target not in tree:
            logger.debug("Proof target is not a leaf of this tree")
            return False
        expected_parts = tree.levels - 1
    else:
        if hash_fn is None:
            raise TypeError("hash_fn is required when verifying against a bare root")
        hasher = as_hasher(hash_fn)
        root = tree_or_root
        if not isinstance(root, bytes):
            return False

    try:
        check_proof_shape(proof, expected_parts=expected_parts, checksum_size=hasher.digest_size)
    except MalformedProofException as e:
        logger.debug(f"Rejecting malformed proof: {e.message}")
        return False

    if proof.root is not None and not hmac.compare_digest(proof.root, root):
        logger.debug("Proof is bound to a different root")
        return False

    # A duplicated node is always proven as the left half of its pair.
    running = proof.target
    for i, part in enumerate(proof.parts):
        if part.is_right:
            running = hasher.branch(running, part.checksum)
        elif hmac.compare_digest(part.checksum, running):
            logger.debug(f"Proof part {i} pairs a node with itself on the left")
            return False
        else:
            running = hasher.branch(part.checksum, running)
    return hmac.compare_digest(running, root)


__all__ = [
    "PROOF_STRATEGIES",
    "ProofPart",
    "Proof",
    "MerkleTree",
    "compute_tree_depth",
    "build_tree",
    "create_proof",
    "get_proof",
    "check_proof_shape",
    "compute_root",
    "verify_proof",
]
