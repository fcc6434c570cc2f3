"""
Hashing Utilities
Digests, the pluggable Hasher used by the tree, and hex helpers.

This module provides:
- Raw digests (SHA-256, double SHA-256, SHA3-256, BLAKE2b-256, identity)
- Hasher: the leaf/branch hash used for every node of a tree
- Domain separation by tag prefix (leaf = 0x00, branch = 0x01)
- Hex encoding/decoding helpers for display and transport

Tree and proof code only ever calls Hasher.leaf() and Hasher.branch();
it never looks at digest internals and never encodes checksums as text.
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Callable

from merkle_audit.schemas.errors import ConfigurationException


ChecksumFunc = Callable[[bytes], bytes]
DomainChecksumFunc = Callable[[bytes, bool], bytes]

# RFC 6962 style domain tags
LEAF_TAG: bytes = b"\x00"
BRANCH_TAG: bytes = b"\x01"


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def sha256d(data: bytes) -> bytes:
    """
    Double SHA-256: sha256(sha256(data)).

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte digest
    """
    return sha256(sha256(data))


def sha3_256(data: bytes) -> bytes:
    """SHA3-256 digest of raw bytes."""
    return hashlib.sha3_256(data).digest()


def blake2b_256(data: bytes) -> bytes:
    """BLAKE2b digest truncated to 32 bytes via digest_size."""
    return hashlib.blake2b(data, digest_size=32).digest()


def identity(data: bytes) -> bytes:
    """
    Return the input unchanged.

    Turns concatenation into the "hash", so rendered trees show exactly
    which blocks were combined. Only useful for tests and examples.
    """
    return bytes(data)


# name -> (digest function, digest size in bytes)
DIGESTS: dict[str, tuple[ChecksumFunc, int | None]] = {
    "sha256": (sha256, 32),
    "sha256d": (sha256d, 32),
    "sha3_256": (sha3_256, 32),
    "blake2b": (blake2b_256, 32),
    "identity": (identity, None),
}


@dataclass(frozen=True)
class Hasher:
    """
    Pluggable checksum function for leaves and branches.

    Two calling conventions are supported for ``func``:

    - plain (``domain_separated=False``): ``func(data) -> bytes``;
      leaves hash the block, branches hash ``left + right``.
    - domain separated (``domain_separated=True``):
      ``func(data, is_leaf) -> bytes``; the function decides how to
      distinguish the two inputs (usually a tag prefix, see ``tagged``).

    Attributes:
        func: The checksum function
        domain_separated: Whether func takes the extra is_leaf flag
        digest_size: Fixed checksum length, if known (used for proof shape checks)
        name: Label used in logs and CLI output
    """
    func: Callable[..., bytes]
    domain_separated: bool = False
    digest_size: int | None = None
    name: str = ""

    def leaf(self, block: bytes) -> bytes:
        """Checksum of a leaf wrapping ``block``."""
        if self.domain_separated:
            return self.func(block, True)
        return self.func(block)

    def branch(self, left: bytes, right: bytes) -> bytes:
        """Checksum of a branch over two child checksums, in this order."""
        data = left + right
        if self.domain_separated:
            return self.func(data, False)
        return self.func(data)


def tagged(
    digest: ChecksumFunc,
    leaf_tag: bytes = LEAF_TAG,
    branch_tag: bytes = BRANCH_TAG,
    digest_size: int | None = None,
    name: str = "",
) -> Hasher:
    """
    Build a domain-separated Hasher from a plain digest.

    leaf(data)   = digest(leaf_tag + data)
    branch(data) = digest(branch_tag + left + right)

    Args:
        digest: Plain one-argument digest
        leaf_tag: Prefix for leaf inputs
        branch_tag: Prefix for branch inputs
        digest_size: Output length of digest, if fixed
        name: Label for the resulting Hasher

    Returns:
        Hasher with domain_separated=True

    Raises:
        ConfigurationException: If the two tags are equal
    """
    if leaf_tag == branch_tag:
        raise ConfigurationException(
            "Leaf and branch tags must differ for domain separation",
            setting="leaf_tag",
            details={"leaf_tag": leaf_tag.hex(), "branch_tag": branch_tag.hex()},
        )

    def _domain_hash(data: bytes, is_leaf: bool) -> bytes:
        return digest((leaf_tag if is_leaf else branch_tag) + data)

    return Hasher(
        func=_domain_hash,
        domain_separated=True,
        digest_size=digest_size,
        name=name or getattr(digest, "__name__", ""),
    )


def as_hasher(hash_fn: Hasher | ChecksumFunc) -> Hasher:
    """
    Normalize a caller-supplied hash function to a Hasher.

    A Hasher is returned unchanged; any other callable is treated as a
    plain one-argument digest without domain separation.

    Raises:
        TypeError: If hash_fn is not callable
    """
    if isinstance(hash_fn, Hasher):
        return hash_fn
    if not callable(hash_fn):
        raise TypeError(f"hash function must be callable, got {type(hash_fn).__name__}")
    return Hasher(func=hash_fn, name=getattr(hash_fn, "__name__", ""))


def get_hasher(
    name: str = "sha256d",
    domain_separation: bool = True,
    leaf_tag: bytes = LEAF_TAG,
    branch_tag: bytes = BRANCH_TAG,
) -> Hasher:
    """
    Look up a named digest and wrap it as a Hasher.

    Args:
        name: One of DIGESTS ("sha256", "sha256d", "sha3_256", "blake2b", "identity")
        domain_separation: Prefix leaf/branch tags when True
        leaf_tag: Leaf prefix (domain separation only)
        branch_tag: Branch prefix (domain separation only)

    Returns:
        Configured Hasher

    Raises:
        ConfigurationException: If the digest name is unknown
    """
    try:
        digest, size = DIGESTS[name]
    except KeyError:
        raise ConfigurationException(
            f"Unknown hash algorithm: {name}",
            setting="hash_algorithm",
            details={"supported": sorted(DIGESTS)},
        ) from None

    if domain_separation:
        return tagged(digest, leaf_tag=leaf_tag, branch_tag=branch_tag, digest_size=size, name=name)
    return Hasher(func=digest, digest_size=size, name=name)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert a hexadecimal string to bytes. The 0x prefix is optional.

    Raises:
        ValueError: If the string has odd length or invalid hex characters

    Example:
        >>> from_hex("0xdeadbeef").hex()
        'deadbeef'
    """
    hex_content = hex_string[2:] if hex_string.startswith(("0x", "0X")) else hex_string

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length, got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def short_hex(width: int | None = 16) -> Callable[[bytes], str]:
    """
    Checksum formatter: hex, truncated to ``width`` characters.

    A width of None (or 0) keeps the full hex string.
    """
    def _fmt(checksum: bytes) -> str:
        text = checksum.hex()
        return text[:width] if width else text
    return _fmt


def as_text(checksum: bytes) -> str:
    """Checksum formatter that decodes bytes as UTF-8 (pairs with identity)."""
    return checksum.decode("utf-8", errors="replace")


__all__ = [
    "ChecksumFunc",
    "DomainChecksumFunc",
    "LEAF_TAG",
    "BRANCH_TAG",
    "DIGESTS",
    "sha256",
    "sha256d",
    "sha3_256",
    "blake2b_256",
    "identity",
    "Hasher",
    "tagged",
    "as_hasher",
    "get_hasher",
    "to_hex",
    "from_hex",
    "short_hex",
    "as_text",
]
