"""
Schemas
File: errors.py

Purpose: Error taxonomy for tree construction, proof generation and proof
transport. Defines both Pydantic models for structured error reporting
and Python exceptions for control flow.

Verification failure is not an error: verifiers return False.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Builder
    INVALID_INPUT = "INVALID_INPUT"

    # Proof generation
    LEAF_NOT_FOUND = "LEAF_NOT_FOUND"
    ROOT_MISMATCH = "ROOT_MISMATCH"

    # Proof transport / shape
    MALFORMED_PROOF = "MALFORMED_PROOF"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # Runtime configuration
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class MerkleAuditError(BaseModel):
    """
    Base error model for structured error reporting.

    Used by the CLI to emit machine-readable errors.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.LEAF_NOT_FOUND],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "MerkleAuditException":
        """Convert this error model to a raisable exception."""
        return MerkleAuditException(
            message=self.message,
            code=self.code,
            details=dict(self.details),
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerkleAuditException(Exception):
    """
    Base exception for all merkle-audit errors.

    Carries structured error information and can be converted to a
    MerkleAuditError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKLE_AUDIT_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MerkleAuditError:
        """Convert this exception to a MerkleAuditError model."""
        return MerkleAuditError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidInputException(MerkleAuditException):
    """Raised when the builder (or a proof request) gets unusable input."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_INPUT,
            details=details,
            retryable=False,
        )


class NotFoundException(MerkleAuditException):
    """Raised when a leaf checksum is not present in the tree's base row."""

    def __init__(
        self,
        message: str,
        leaf_checksum: bytes | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_checksum is not None:
            full_details["leaf_checksum"] = leaf_checksum.hex()
        super().__init__(
            message=message,
            code=ErrorCodes.LEAF_NOT_FOUND,
            details=full_details,
            retryable=False,
        )


class RootMismatchException(MerkleAuditException):
    """Raised when a caller-supplied root is not the tree's root."""

    def __init__(
        self,
        message: str,
        expected_root: bytes | None = None,
        actual_root: bytes | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if expected_root is not None:
            full_details["expected_root"] = expected_root.hex()
        if actual_root is not None:
            full_details["actual_root"] = actual_root.hex()
        super().__init__(
            message=message,
            code=ErrorCodes.ROOT_MISMATCH,
            details=full_details,
            retryable=False,
        )


class MalformedProofException(MerkleAuditException):
    """Raised when a proof's structure (part count, checksum size, types) is invalid."""

    def __init__(
        self,
        message: str,
        part_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if part_index is not None:
            full_details["part_index"] = part_index
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_PROOF,
            details=full_details,
            retryable=False,
        )


class CanonicalizationException(MerkleAuditException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )


class ConfigurationException(MerkleAuditException):
    """Exception raised for unknown hash algorithms or bad config values."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if setting:
            full_details["setting"] = setting
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIGURATION_ERROR,
            details=full_details,
            retryable=False,
        )


__all__ = [
    "ErrorCodes",
    "MerkleAuditError",
    "MerkleAuditException",
    "InvalidInputException",
    "NotFoundException",
    "RootMismatchException",
    "MalformedProofException",
    "CanonicalizationException",
    "ConfigurationException",
]
