"""
Hashing Unit Tests
Tests for merkle_audit/crypto/hashing.py

Covers:
1. Raw digests match hashlib
2. Hasher calling conventions (plain and domain separated)
3. Tagged hashers separate leaves from branches
4. Named lookup and configuration errors
5. Hex helpers and checksum formatters
"""
import hashlib
from dataclasses import FrozenInstanceError

import pytest

from merkle_audit.crypto.hashing import (
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
from merkle_audit.schemas.errors import ConfigurationException, ErrorCodes


class TestDigests:
    """Tests for the raw digest functions."""

    def test_sha256_known_vector(self):
        """sha256(b"hello") matches the published digest."""
        assert sha256(b"hello").hex() == (
            "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
        )

    def test_sha256d_is_double_sha256(self):
        inner = hashlib.sha256(b"data").digest()
        assert sha256d(b"data") == hashlib.sha256(inner).digest()

    def test_sha3_256_matches_hashlib(self):
        assert sha3_256(b"data") == hashlib.sha3_256(b"data").digest()

    def test_blake2b_is_32_bytes(self):
        digest = blake2b_256(b"data")
        assert len(digest) == 32
        assert digest == hashlib.blake2b(b"data", digest_size=32).digest()

    def test_identity_returns_input(self):
        assert identity(b"alpha") == b"alpha"
        assert identity(bytearray(b"beta")) == b"beta"

    def test_digest_table_sizes(self):
        """Every fixed-size digest in the table produces its declared size."""
        for name, (digest, size) in DIGESTS.items():
            if size is not None:
                assert len(digest(b"x")) == size, name


class TestHasher:
    """Tests for the Hasher calling conventions."""

    def test_plain_leaf_and_branch(self):
        hasher = Hasher(func=identity)

        assert hasher.leaf(b"alpha") == b"alpha"
        assert hasher.branch(b"alpha", b"beta") == b"alphabeta"

    def test_branch_order_matters(self):
        hasher = Hasher(func=sha256)
        assert hasher.branch(b"a", b"b") != hasher.branch(b"b", b"a")

    def test_domain_separated_passes_leaf_flag(self):
        """Domain-separated functions receive is_leaf as the second argument."""
        calls = []

        def record(data, is_leaf):
            calls.append((data, is_leaf))
            return data

        hasher = Hasher(func=record, domain_separated=True)
        hasher.leaf(b"alpha")
        hasher.branch(b"alpha", b"beta")

        assert calls == [(b"alpha", True), (b"alphabeta", False)]

    def test_hasher_is_frozen(self):
        hasher = Hasher(func=identity)
        with pytest.raises(FrozenInstanceError):
            hasher.domain_separated = True


class TestTagged:
    """Tests for tag-prefixed domain separation."""

    def test_tags_are_prefixed(self):
        hasher = tagged(identity)

        assert hasher.leaf(b"alpha") == LEAF_TAG + b"alpha"
        assert hasher.branch(b"a", b"b") == BRANCH_TAG + b"ab"

    def test_leaf_and_branch_differ_on_same_input(self):
        """A 64-byte leaf cannot collide with a branch over the same bytes."""
        hasher = tagged(sha256, digest_size=32)
        left, right = sha256(b"l"), sha256(b"r")

        assert hasher.leaf(left + right) != hasher.branch(left, right)

    def test_custom_tags(self):
        hasher = tagged(identity, leaf_tag=b"L", branch_tag=b"B")

        assert hasher.leaf(b"x") == b"Lx"
        assert hasher.branch(b"x", b"y") == b"Bxy"

    def test_equal_tags_rejected(self):
        with pytest.raises(ConfigurationException) as exc_info:
            tagged(sha256, leaf_tag=b"\x00", branch_tag=b"\x00")

        assert exc_info.value.code == ErrorCodes.CONFIGURATION_ERROR

    def test_name_defaults_to_digest_name(self):
        assert tagged(sha256).name == "sha256"


class TestAsHasher:
    """Tests for hash function normalization."""

    def test_hasher_passes_through(self):
        hasher = Hasher(func=identity)
        assert as_hasher(hasher) is hasher

    def test_callable_wrapped_as_plain(self):
        hasher = as_hasher(sha256)

        assert isinstance(hasher, Hasher)
        assert hasher.domain_separated is False
        assert hasher.leaf(b"x") == sha256(b"x")

    def test_non_callable_rejected(self):
        with pytest.raises(TypeError):
            as_hasher("sha256")


class TestGetHasher:
    """Tests for named hasher lookup."""

    def test_default_is_domain_separated_sha256d(self):
        hasher = get_hasher()

        assert hasher.name == "sha256d"
        assert hasher.domain_separated is True
        assert hasher.digest_size == 32
        assert hasher.leaf(b"x") == sha256d(LEAF_TAG + b"x")

    def test_without_domain_separation(self):
        hasher = get_hasher("sha256", domain_separation=False)

        assert hasher.domain_separated is False
        assert hasher.leaf(b"x") == sha256(b"x")
        assert hasher.branch(b"a", b"b") == sha256(b"ab")

    def test_domain_separation_changes_leaf_checksums(self):
        plain = get_hasher("sha256", domain_separation=False)
        separated = get_hasher("sha256", domain_separation=True)

        assert plain.leaf(b"x") != separated.leaf(b"x")

    def test_identity_has_no_fixed_size(self):
        assert get_hasher("identity").digest_size is None

    def test_unknown_algorithm(self):
        with pytest.raises(ConfigurationException) as exc_info:
            get_hasher("md5")

        assert exc_info.value.details["setting"] == "hash_algorithm"
        assert "sha256" in exc_info.value.details["supported"]


class TestHexHelpers:
    """Tests for hex encoding helpers and formatters."""

    def test_to_hex_has_prefix(self):
        assert to_hex(b"\xde\xad\xbe\xef") == "0xdeadbeef"

    def test_from_hex_with_and_without_prefix(self):
        assert from_hex("0xdeadbeef") == b"\xde\xad\xbe\xef"
        assert from_hex("DEADBEEF") == b"\xde\xad\xbe\xef"

    def test_from_hex_odd_length(self):
        with pytest.raises(ValueError, match="even length"):
            from_hex("abc")

    def test_from_hex_invalid_characters(self):
        with pytest.raises(ValueError, match="Invalid hex"):
            from_hex("zz")

    def test_short_hex_truncates(self):
        fmt = short_hex(8)
        assert fmt(bytes(range(16))) == "00010203"

    def test_short_hex_full_width(self):
        data = bytes(range(4))
        assert short_hex(None)(data) == "00010203"
        assert short_hex(0)(data) == "00010203"

    def test_as_text(self):
        assert as_text(b"alphabeta") == "alphabeta"
