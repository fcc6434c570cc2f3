"""
Human-readable rendering of trees and audit paths.

Both renderers take a caller-supplied checksum formatter (hex, truncated
hex, plain text for the identity hash); nothing here encodes checksums
on its own, and nothing touches tree state.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from merkle_audit.crypto.hashing import ChecksumFunc, Hasher, as_hasher

if TYPE_CHECKING:
    from merkle_audit.merkle.merkle_tree import MerkleTree, Proof


ChecksumFormatter = Callable[[bytes], str]


def _indent(spaces: int, text: str) -> str:
    return " " * spaces + text


def render_node(tree: MerkleTree, node_id: int, fmt: ChecksumFormatter, indent: int = 0) -> str:
    """
    Render one node and its subtree.

    Every node starts on a new line, children indented two spaces deeper:

        (B root: <checksum> <left> <right>)
        (L root: <checksum>)
    """
    node = tree.node(node_id)
    checksum = fmt(node.checksum)
    if node.is_leaf:
        return "\n" + _indent(indent, f"(L root: {checksum})")

    left = render_node(tree, node.left, fmt, indent + 2)
    right = render_node(tree, node.right, fmt, indent + 2)
    return "\n" + _indent(indent, f"(B root: {checksum} {left} {right})")


def render_tree(tree: MerkleTree, fmt: ChecksumFormatter, indent: int = 0) -> str:
    """Render the whole tree from its root. Output starts with a newline."""
    return render_node(tree, tree.root_id, fmt, indent)


def render_proof(proof: Proof, hash_fn: Hasher | ChecksumFunc, fmt: ChecksumFormatter) -> str:
    """
    Render an audit path as one "left + right = parent" line per step.

    The parent column is recomputed with hash_fn. An empty path renders
    as an empty string.
    """
    if not proof.parts:
        return ""

    hasher = as_hasher(hash_fn)
    lines = [f"route from {fmt(proof.target)} (leaf) to root:", ""]

    prev = proof.target
    for part in proof.parts:
        if part.is_right:
            curr = hasher.branch(prev, part.checksum)
            lines.append(f"{fmt(prev)} + {fmt(part.checksum)} = {fmt(curr)}")
        else:
            curr = hasher.branch(part.checksum, prev)
            lines.append(f"{fmt(part.checksum)} + {fmt(prev)} = {fmt(curr)}")
        prev = curr

    return "\n".join(lines)


__all__ = [
    "ChecksumFormatter",
    "render_node",
    "render_tree",
    "render_proof",
]
