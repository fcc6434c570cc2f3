"""
Merkle Tree Nodes
Leaf/Branch node types and the flat node table they live in.

Nodes reference each other by integer id into the table, never by object
reference: a Branch names its children by id and every child names its
parent by id. The table is append-only while a tree is being built and is
sealed into a tuple afterwards.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Union


@dataclass(frozen=True)
class Leaf:
    """
    A node wrapping exactly one input block.

    Attributes:
        checksum: Leaf hash of the block
        block: The block bytes
        parent: Id of the parent Branch, None only while building
    """
    checksum: bytes
    block: bytes
    parent: int | None = None

    @property
    def is_leaf(self) -> bool:
        return True


@dataclass(frozen=True)
class Branch:
    """
    A node over exactly two children, referenced by id.

    left and right are equal when the node was paired with itself to keep
    its level even.

    Attributes:
        checksum: Branch hash of left.checksum + right.checksum
        left: Id of the left child
        right: Id of the right child
        parent: Id of the parent Branch, None for the root
    """
    checksum: bytes
    left: int
    right: int
    parent: int | None = None

    @property
    def is_leaf(self) -> bool:
        return False

    @property
    def is_duplicate(self) -> bool:
        """True if both children are the same node."""
        return self.left == self.right


Node = Union[Leaf, Branch]


class NodeTable:
    """
    Append-only arena of nodes addressed by integer id.

    add_branch() is the only way to create a Branch, and it sets the
    children's parent ids in the same call, so no node is ever observable
    with a stale parent link.
    """

    def __init__(self) -> None:
        self._nodes: list[Node] = []
        self._sealed = False

    def __len__(self) -> int:
        return len(self._nodes)

    def __getitem__(self, node_id: int) -> Node:
        return self._nodes[node_id]

    def add_leaf(self, checksum: bytes, block: bytes) -> int:
        """Append a leaf and return its id."""
        self._check_open()
        self._nodes.append(Leaf(checksum=checksum, block=block))
        return len(self._nodes) - 1

    def add_branch(self, checksum: bytes, left: int, right: int) -> int:
        """
        Append a branch over two existing nodes and link them to it.

        Args:
            checksum: Branch checksum (already computed by the caller)
            left: Id of the left child
            right: Id of the right child (may equal left)

        Returns:
            Id of the new branch

        Raises:
            ValueError: If a child id is unknown or already has a parent
        """
        self._check_open()
        for child in (left, right):
            if not 0 <= child < len(self._nodes):
                raise ValueError(f"Unknown child node id: {child}")
            if self._nodes[child].parent is not None:
                raise ValueError(f"Node {child} already has a parent")

        branch_id = len(self._nodes)
        self._nodes.append(Branch(checksum=checksum, left=left, right=right))
        for child in {left, right}:
            self._nodes[child] = replace(self._nodes[child], parent=branch_id)
        return branch_id

    def seal(self) -> tuple[Node, ...]:
        """Freeze the table and return its nodes as a tuple."""
        self._sealed = True
        return tuple(self._nodes)

    def _check_open(self) -> None:
        if self._sealed:
            raise RuntimeError("NodeTable is sealed")


__all__ = [
    "Leaf",
    "Branch",
    "Node",
    "NodeTable",
]
