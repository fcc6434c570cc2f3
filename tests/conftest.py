"""
Pytest configuration and shared fixtures for merkle-audit tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

GREEK = _common.GREEK
greek_blocks = _common.greek_blocks
make_blocks = _common.make_blocks
identity_hasher = _common.identity_hasher
flag_ignoring_identity_hasher = _common.flag_ignoring_identity_hasher
sha256_hasher = _common.sha256_hasher
text = _common.text


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def identity_hash():
    """Plain identity Hasher: checksums are concatenated blocks."""
    return identity_hasher()


@pytest.fixture
def fmt():
    """Formatter that shows identity checksums as text."""
    return text


@pytest.fixture
def three_block_tree(identity_hash):
    """Tree over alpha, beta, kappa with the identity hash."""
    from merkle_audit.merkle import build_tree
    return build_tree(identity_hash, greek_blocks(3))


@pytest.fixture
def eight_block_tree(identity_hash):
    """Tree over the eight Greek blocks with the identity hash."""
    from merkle_audit.merkle import build_tree
    return build_tree(identity_hash, greek_blocks(8))


@pytest.fixture
def sha_tree():
    """Domain-separated SHA-256 tree over eight generated blocks."""
    from merkle_audit.merkle import build_tree
    return build_tree(sha256_hasher(), make_blocks(8))


@pytest.fixture
def clean_env(monkeypatch):
    """Remove MERKLE_AUDIT_* variables so config tests start from defaults."""
    import os
    for key in list(os.environ):
        if key.startswith("MERKLE_AUDIT_"):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
