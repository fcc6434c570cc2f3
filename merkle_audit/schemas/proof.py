"""
Schemas
File: proof.py

Purpose: Wire format for audit proofs. A proof leaves the process as a
JSON document of hex-encoded checksums and comes back in through these
models, which reject anything structurally wrong before it reaches the
verifier.
"""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Wire format version for proof documents
PROOF_SCHEMA_VERSION: str = "v1"

_HEX_RE = re.compile(r"^(?:[0-9a-f]{2})*$")


def _validate_hex(value: str) -> str:
    value = value.lower()
    if value.startswith("0x"):
        value = value[2:]
    if not _HEX_RE.match(value):
        raise ValueError("checksum must be an even-length hex string")
    return value


class ProofPartDocument(BaseModel):
    """
    One step of an audit path.

    is_right=True means the sibling sits to the right of the running hash
    (fold running + sibling); False means sibling + running.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    is_right: bool = Field(..., description="Sibling is concatenated on the right")
    checksum: str = Field(..., description="Sibling checksum, hex encoded", min_length=2)

    @field_validator("checksum")
    @classmethod
    def validate_checksum_hex(cls, v: str) -> str:
        """Normalize to lowercase hex without prefix."""
        return _validate_hex(v)


class ProofDocument(BaseModel):
    """
    Serialized audit proof: target leaf checksum, ordered path from leaf to
    root, and optionally the root the proof was generated against.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: Literal["v1"] = Field(default=PROOF_SCHEMA_VERSION)
    target: str = Field(..., description="Leaf checksum being proven, hex encoded", min_length=2)
    parts: list[ProofPartDocument] = Field(
        default_factory=list,
        description="Audit path in leaf-to-root order",
    )
    root: str | None = Field(
        default=None,
        description="Root checksum the proof is bound to, hex encoded",
    )

    @field_validator("target")
    @classmethod
    def validate_target_hex(cls, v: str) -> str:
        """Normalize to lowercase hex without prefix."""
        return _validate_hex(v)

    @field_validator("root")
    @classmethod
    def validate_root_hex(cls, v: str | None) -> str | None:
        """Normalize to lowercase hex without prefix."""
        if v is None:
            return v
        if not v:
            raise ValueError("root must not be empty")
        return _validate_hex(v)

    @property
    def depth(self) -> int:
        """Number of levels between the leaf and the root."""
        return len(self.parts)


__all__ = [
    "PROOF_SCHEMA_VERSION",
    "ProofPartDocument",
    "ProofDocument",
]
