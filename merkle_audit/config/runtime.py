"""
Runtime Configuration

Central configuration for hashing, proof generation and display.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from merkle_audit.crypto.hashing import BRANCH_TAG, DIGESTS, LEAF_TAG, Hasher, get_hasher, short_hex
from merkle_audit.schemas.errors import ConfigurationException

load_dotenv()

ENV_PREFIX = "MERKLE_AUDIT_"


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class HashConfig:
    """Configuration for the checksum function."""
    algorithm: str = "sha256d"
    domain_separation: bool = True
    leaf_tag: str = LEAF_TAG.hex()
    branch_tag: str = BRANCH_TAG.hex()

    def __post_init__(self):
        if self.algorithm not in DIGESTS:
            raise ConfigurationException(
                f"Unknown hash algorithm: {self.algorithm}",
                setting="hash.algorithm",
                details={"supported": sorted(DIGESTS)},
            )

    def build_hasher(self) -> Hasher:
        """Create the Hasher described by this config."""
        try:
            leaf_tag = bytes.fromhex(self.leaf_tag)
            branch_tag = bytes.fromhex(self.branch_tag)
        except ValueError as e:
            raise ConfigurationException(
                f"Domain tags must be hex strings: {e}",
                setting="hash.leaf_tag",
            ) from e
        return get_hasher(
            self.algorithm,
            domain_separation=self.domain_separation,
            leaf_tag=leaf_tag,
            branch_tag=branch_tag,
        )


@dataclass
class ProofConfig:
    """Configuration for proof generation."""
    strategy: str = "index"

    def __post_init__(self):
        if self.strategy not in ("index", "pointer"):
            raise ConfigurationException(
                f"Unknown proof strategy: {self.strategy}",
                setting="proof.strategy",
            )


@dataclass
class DisplayConfig:
    """Configuration for rendering checksums."""
    hex_width: Optional[int] = 16

    def formatter(self):
        """Checksum formatter: hex truncated to hex_width characters."""
        return short_hex(self.hex_width)


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    hash: HashConfig = field(default_factory=HashConfig)
    proof: ProofConfig = field(default_factory=ProofConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - MERKLE_AUDIT_HASH_ALGORITHM: digest name (sha256, sha256d, sha3_256, blake2b)
        - MERKLE_AUDIT_DOMAIN_SEPARATION: prefix leaf/branch tags (true/false)
        - MERKLE_AUDIT_LEAF_TAG: leaf tag, hex
        - MERKLE_AUDIT_BRANCH_TAG: branch tag, hex
        - MERKLE_AUDIT_PROOF_STRATEGY: index or pointer
        - MERKLE_AUDIT_HEX_WIDTH: displayed hex characters (0 = full)
        """
        overrides: dict[str, Any] = {}

        # Hash settings
        if os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM"):
            overrides.setdefault("hash", {})["algorithm"] = os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM")
        if os.getenv(f"{ENV_PREFIX}DOMAIN_SEPARATION"):
            overrides.setdefault("hash", {})["domain_separation"] = _env_bool(
                os.getenv(f"{ENV_PREFIX}DOMAIN_SEPARATION", "true")
            )
        if os.getenv(f"{ENV_PREFIX}LEAF_TAG"):
            overrides.setdefault("hash", {})["leaf_tag"] = os.getenv(f"{ENV_PREFIX}LEAF_TAG")
        if os.getenv(f"{ENV_PREFIX}BRANCH_TAG"):
            overrides.setdefault("hash", {})["branch_tag"] = os.getenv(f"{ENV_PREFIX}BRANCH_TAG")

        # Proof settings
        if os.getenv(f"{ENV_PREFIX}PROOF_STRATEGY"):
            overrides.setdefault("proof", {})["strategy"] = os.getenv(f"{ENV_PREFIX}PROOF_STRATEGY")

        # Display settings
        if os.getenv(f"{ENV_PREFIX}HEX_WIDTH"):
            raw = os.getenv(f"{ENV_PREFIX}HEX_WIDTH", "16")
            try:
                overrides.setdefault("display", {})["hex_width"] = int(raw)
            except ValueError:
                raise ConfigurationException(
                    f"{ENV_PREFIX}HEX_WIDTH must be an integer, got {raw!r}",
                    setting="display.hex_width",
                ) from None

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        hash_data = data.get("hash", {}) or {}
        proof_data = data.get("proof", {}) or {}
        display_data = data.get("display", {}) or {}

        try:
            hash_config = HashConfig(**hash_data)
            proof_config = ProofConfig(**proof_data)
            display_config = DisplayConfig(**display_data)
        except TypeError as e:
            raise ConfigurationException(f"Invalid configuration: {e}") from e

        return cls(
            hash=hash_config,
            proof=proof_config,
            display=display_config,
            extra=data.get("extra", {}) or {},
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        data = self.to_dict()
        for section, values in overrides.items():
            data.setdefault(section, {}).update(values)
        new_config = self.from_dict(data)
        new_config.extra = copy.deepcopy(self.extra)
        return new_config

    def hasher(self) -> Hasher:
        """Hasher built from the hash section."""
        return self.hash.build_hasher()

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "hash": {
                "algorithm": self.hash.algorithm,
                "domain_separation": self.hash.domain_separation,
                "leaf_tag": self.hash.leaf_tag,
                "branch_tag": self.hash.branch_tag,
            },
            "proof": {
                "strategy": self.proof.strategy,
            },
            "display": {
                "hex_width": self.display.hex_width,
            },
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig) -> None:
    """Set the default runtime configuration."""
    global _default_config
    _default_config = config
