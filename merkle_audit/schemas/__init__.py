"""
Schemas
File: __init__.py

Purpose: Export the public API for the schemas module: error taxonomy,
canonical serialization and the proof wire format.
"""

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
)

# Error models and exceptions
from .errors import (
    CanonicalizationException,
    ConfigurationException,
    ErrorCodes,
    InvalidInputException,
    MalformedProofException,
    MerkleAuditError,
    MerkleAuditException,
    NotFoundException,
    RootMismatchException,
)

# Proof wire format
from .proof import (
    PROOF_SCHEMA_VERSION,
    ProofDocument,
    ProofPartDocument,
)

__all__ = [
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    # Errors
    "CanonicalizationException",
    "ConfigurationException",
    "ErrorCodes",
    "InvalidInputException",
    "MalformedProofException",
    "MerkleAuditError",
    "MerkleAuditException",
    "NotFoundException",
    "RootMismatchException",
    # Proof wire format
    "PROOF_SCHEMA_VERSION",
    "ProofDocument",
    "ProofPartDocument",
]
