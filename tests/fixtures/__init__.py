"""
Test fixtures package for merkle-audit tests.

This package provides factory functions for creating test objects.
- common.py: block factories and hashers shared by all tests

Usage:
    from fixtures.common import greek_blocks, identity_hasher

    def test_something():
        tree = build_tree(identity_hasher(), greek_blocks(3))
"""

from .common import (
    GREEK,
    flag_ignoring_identity_hasher,
    greek_blocks,
    identity_hasher,
    make_blocks,
    sha256_hasher,
    text,
)

__all__ = [
    "GREEK",
    "flag_ignoring_identity_hasher",
    "greek_blocks",
    "identity_hasher",
    "make_blocks",
    "sha256_hasher",
    "text",
]
