"""
Merkle Tree Unit Tests
Tests for merkle_audit/merkle/merkle_tree.py (construction) and
merkle_audit/merkle/printing.py (tree rendering)

Covers:
1. Shape - level count and duplicate-last pairing
2. Rendering - exact nested output with the identity hash
3. Root and proof determinism, order sensitivity
4. Invalid input - empty lists and non-bytes blocks
5. Node table links - every non-root node has exactly one parent
"""
import pytest

from merkle_audit.crypto.hashing import get_hasher, sha256, short_hex
from merkle_audit.merkle import (
    Branch,
    Leaf,
    MerkleProver,
    MerkleTree,
    build_tree,
    compute_tree_depth,
    create_proof,
    get_proof,
    render_tree,
)
from merkle_audit.schemas.errors import InvalidInputException

from fixtures.common import flag_ignoring_identity_hasher, greek_blocks, make_blocks


def _lines(*lines: str) -> str:
    return "\n".join(lines)


ONE_BLOCK = _lines(
    "(B root: alphaalpha ",
    "  (L root: alpha) ",
    "  (L root: alpha))",
)

TWO_BLOCKS = _lines(
    "(B root: alphabeta ",
    "  (L root: alpha) ",
    "  (L root: beta))",
)

THREE_BLOCKS = _lines(
    "(B root: alphabetakappakappa ",
    "  (B root: alphabeta ",
    "    (L root: alpha) ",
    "    (L root: beta)) ",
    "  (B root: kappakappa ",
    "    (L root: kappa) ",
    "    (L root: kappa)))",
)

FOUR_BLOCKS = _lines(
    "(B root: alphabetakappagamma ",
    "  (B root: alphabeta ",
    "    (L root: alpha) ",
    "    (L root: beta)) ",
    "  (B root: kappagamma ",
    "    (L root: kappa) ",
    "    (L root: gamma)))",
)

SIX_BLOCKS = _lines(
    "(B root: alphabetakappagammaepsilonomegaepsilonomega ",
    "  (B root: alphabetakappagamma ",
    "    (B root: alphabeta ",
    "      (L root: alpha) ",
    "      (L root: beta)) ",
    "    (B root: kappagamma ",
    "      (L root: kappa) ",
    "      (L root: gamma))) ",
    "  (B root: epsilonomegaepsilonomega ",
    "    (B root: epsilonomega ",
    "      (L root: epsilon) ",
    "      (L root: omega)) ",
    "    (B root: epsilonomega ",
    "      (L root: epsilon) ",
    "      (L root: omega))))",
)


class TestTreeDepth:
    """Tests for compute_tree_depth."""

    @pytest.mark.parametrize(
        "num_leaves, levels",
        [(0, 0), (1, 2), (2, 2), (3, 3), (4, 3), (5, 4), (6, 4), (8, 4), (9, 5), (16, 5), (17, 6)],
    )
    def test_levels(self, num_leaves, levels):
        assert compute_tree_depth(num_leaves) == levels

    def test_built_tree_matches_depth(self, identity_hash):
        for n in range(1, 34):
            tree = build_tree(identity_hash, make_blocks(n))
            assert tree.levels == compute_tree_depth(n), n
            assert len(tree.rows[-1]) == 1, n


class TestRendering:
    """Exact nested rendering with the identity hash."""

    @pytest.mark.parametrize(
        "count, expected",
        [(1, ONE_BLOCK), (2, TWO_BLOCKS), (3, THREE_BLOCKS), (4, FOUR_BLOCKS), (6, SIX_BLOCKS)],
    )
    def test_render(self, identity_hash, fmt, count, expected):
        tree = build_tree(identity_hash, greek_blocks(count))
        assert render_tree(tree, fmt).strip("\n") == expected

    def test_output_starts_with_newline(self, three_block_tree, fmt):
        assert three_block_tree.to_string(fmt).startswith("\n(B root: ")

    def test_indent_offsets_every_line(self, three_block_tree, fmt):
        rendered = three_block_tree.to_string(fmt, indent=4)
        lines = rendered.strip("\n").split("\n")

        assert lines[0].startswith("    (B root: alphabetakappakappa")
        assert lines[1].startswith("      (B root: alphabeta")

    def test_domain_separated_identity_renders_the_same(self, fmt):
        """A domain-separated function that ignores the flag builds the same tree."""
        tree = build_tree(flag_ignoring_identity_hasher(), greek_blocks(6))
        assert render_tree(tree, fmt).strip("\n") == SIX_BLOCKS

    def test_hex_formatter(self):
        tree = build_tree(sha256, [b"a"])
        rendered = render_tree(tree, short_hex(16))

        assert f"(L root: {sha256(b'a').hex()[:16]})" in rendered

    def test_rendering_does_not_change_tree(self, three_block_tree, fmt):
        before = (three_block_tree.nodes, three_block_tree.rows)
        render_tree(three_block_tree, fmt)
        assert (three_block_tree.nodes, three_block_tree.rows) == before


class TestDuplication:
    """Odd rows pair their last node with itself."""

    def test_three_blocks_duplicate_last(self, three_block_tree):
        assert three_block_tree.row_checksums(1) == (b"alphabeta", b"kappakappa")

        kk = three_block_tree.node(three_block_tree.rows[1][1])
        assert isinstance(kk, Branch)
        assert kk.is_duplicate
        assert kk.left == three_block_tree.rows[0][2]

    def test_single_block_root(self, identity_hash):
        tree = build_tree(identity_hash, [b"alpha"])

        assert tree.levels == 2
        assert tree.root_checksum == b"alphaalpha"

    def test_single_block_root_real_hash(self):
        hasher = get_hasher("sha256", domain_separation=False)
        tree = build_tree(hasher, [b"only"])

        leaf = sha256(b"only")
        assert tree.root_checksum == sha256(leaf + leaf)

    def test_six_blocks_duplicate_at_second_level(self, identity_hash):
        tree = build_tree(identity_hash, greek_blocks(6))

        assert tree.row_checksums(1) == (b"alphabeta", b"kappagamma", b"epsilonomega")
        assert tree.row_checksums(2) == (b"alphabetakappagamma", b"epsilonomegaepsilonomega")
        assert tree.root_checksum == b"alphabetakappagammaepsilonomegaepsilonomega"


class TestRootDeterminism:
    """Tests for deterministic root computation."""

    def test_same_blocks_same_root(self):
        hasher = get_hasher("sha256d")
        roots = {build_tree(hasher, make_blocks(7)).root_checksum for _ in range(10)}
        assert len(roots) == 1

    @pytest.mark.parametrize("strategy", ["index", "pointer"])
    def test_same_blocks_same_proofs(self, strategy):
        hasher = get_hasher("sha256d")
        blocks = make_blocks(7)
        first = build_tree(hasher, blocks)
        second = build_tree(hasher, list(blocks))

        for leaf in first.leaves:
            assert create_proof(first, leaf, strategy) == create_proof(second, leaf, strategy)
            assert get_proof(first, first.root_checksum, leaf, strategy) == get_proof(
                second, second.root_checksum, leaf, strategy
            )

    def test_block_order_matters(self):
        hasher = get_hasher("sha256")
        blocks = make_blocks(4)

        assert build_tree(hasher, blocks).root_checksum != build_tree(hasher, blocks[::-1]).root_checksum

    def test_domain_separation_changes_root(self):
        blocks = make_blocks(5)
        plain = build_tree(get_hasher("sha256", domain_separation=False), blocks)
        separated = build_tree(get_hasher("sha256", domain_separation=True), blocks)

        assert plain.root_checksum != separated.root_checksum

    def test_prover_compute_root(self):
        hasher = get_hasher("blake2b")
        blocks = make_blocks(3)
        assert MerkleProver.compute_root(hasher, blocks) == build_tree(hasher, blocks).root_checksum

    def test_build_classmethod(self, identity_hash):
        tree = MerkleTree.build(identity_hash, greek_blocks(3))
        assert tree.root_checksum == b"alphabetakappakappa"


class TestInvalidInput:
    """Construction rejects unusable input."""

    def test_empty_block_list(self, identity_hash):
        with pytest.raises(InvalidInputException, match="empty"):
            build_tree(identity_hash, [])

    def test_single_bytes_value(self, identity_hash):
        with pytest.raises(InvalidInputException):
            build_tree(identity_hash, b"alpha")

    def test_non_bytes_block(self, identity_hash):
        with pytest.raises(InvalidInputException) as exc_info:
            build_tree(identity_hash, [b"alpha", "beta"])

        assert exc_info.value.details == {"index": 1, "type": "str"}

    def test_non_callable_hash(self):
        with pytest.raises(TypeError):
            build_tree(None, [b"alpha"])


class TestTreeStructure:
    """Accessors and parent links."""

    def test_leaves_and_blocks(self, three_block_tree):
        assert three_block_tree.leaves == (b"alpha", b"beta", b"kappa")
        assert three_block_tree.blocks == (b"alpha", b"beta", b"kappa")
        assert len(three_block_tree) == 3

    def test_bytearray_blocks_stored_as_bytes(self, identity_hash):
        tree = build_tree(identity_hash, [bytearray(b"alpha")])
        assert tree.blocks == (b"alpha",)

    def test_membership(self, three_block_tree):
        assert b"beta" in three_block_tree
        assert b"zeta" not in three_block_tree
        assert "beta" not in three_block_tree

    def test_index_of_first_duplicate_block(self, identity_hash):
        tree = build_tree(identity_hash, [b"a", b"b", b"a"])
        assert tree.index_of(b"a") == 0
        assert tree.index_of(b"z") is None

    def test_every_non_root_node_has_one_parent(self, identity_hash):
        tree = build_tree(identity_hash, make_blocks(11))

        for node_id, node in enumerate(tree.nodes):
            if node_id == tree.root_id:
                assert node.parent is None
                continue
            parent = tree.node(node.parent)
            assert isinstance(parent, Branch)
            assert node_id in (parent.left, parent.right)

    def test_leaf_nodes_keep_blocks(self, three_block_tree):
        for node_id in three_block_tree.rows[0]:
            node = three_block_tree.node(node_id)
            assert isinstance(node, Leaf)
            assert node.checksum == node.block

    def test_leaf_checksum_of_uses_tree_hasher(self):
        hasher = get_hasher("sha256")
        tree = build_tree(hasher, [b"x", b"y"])
        assert tree.leaf_checksum_of(b"y") == hasher.leaf(b"y")

    def test_repr(self, three_block_tree):
        assert repr(three_block_tree).startswith("MerkleTree(leaves=3, levels=3, root=")
