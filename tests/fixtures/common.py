"""
Common test fixtures shared by all modules.

Provides factory functions for blocks and hashers:
- Greek-letter blocks whose identity-hash checksums read as text
- Generated blocks for larger trees
- Identity hashers (plain and domain-separated) and a SHA-256 hasher
"""

from merkle_audit.crypto.hashing import Hasher, get_hasher, identity


GREEK = [
    "alpha", "beta", "kappa", "gamma", "epsilon", "omega", "mu", "zeta",
    "theta", "iota", "lambda", "sigma",
]


def greek_blocks(count: int) -> list[bytes]:
    """First `count` Greek letter names as blocks."""
    if count > len(GREEK):
        raise ValueError(f"Only {len(GREEK)} Greek blocks available")
    return [name.encode() for name in GREEK[:count]]


def make_blocks(count: int, prefix: str = "block") -> list[bytes]:
    """
    Create distinct blocks for testing.

    Args:
        count: Number of blocks
        prefix: Text prefix of every block

    Returns:
        [b"block-0", b"block-1", ...]
    """
    return [f"{prefix}-{i}".encode() for i in range(count)]


def identity_hasher() -> Hasher:
    """Plain identity: leaf(x) = x, branch(l, r) = l + r."""
    return Hasher(func=identity, name="identity")


def _identity_ignoring_flag(data: bytes, is_leaf: bool) -> bytes:
    return bytes(data)


def flag_ignoring_identity_hasher() -> Hasher:
    """Domain-separated calling convention whose function ignores the leaf flag."""
    return Hasher(func=_identity_ignoring_flag, domain_separated=True, name="identity")


def sha256_hasher(domain_separation: bool = True) -> Hasher:
    return get_hasher("sha256", domain_separation=domain_separation)


def text(checksum: bytes) -> str:
    """Show identity checksums as the text they concatenate."""
    return checksum.decode()
