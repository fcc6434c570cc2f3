"""
Cryptographic utilities.

Digests and the pluggable Hasher used for every tree node.
"""
from .hashing import (
    BRANCH_TAG,
    DIGESTS,
    LEAF_TAG,
    Hasher,
    as_hasher,
    as_text,
    blake2b_256,
    from_hex,
    get_hasher,
    identity,
    sha256,
    sha256d,
    sha3_256,
    short_hex,
    tagged,
    to_hex,
)

__all__ = [
    "BRANCH_TAG",
    "DIGESTS",
    "LEAF_TAG",
    "Hasher",
    "as_hasher",
    "as_text",
    "blake2b_256",
    "from_hex",
    "get_hasher",
    "identity",
    "sha256",
    "sha256d",
    "sha3_256",
    "short_hex",
    "tagged",
    "to_hex",
]
