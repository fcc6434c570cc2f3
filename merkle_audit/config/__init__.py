"""
Runtime Configuration Module

Provides configuration loading and management for merkle-audit.
"""

from .runtime import (
    DisplayConfig,
    HashConfig,
    ProofConfig,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "DisplayConfig",
    "HashConfig",
    "ProofConfig",
    "RuntimeConfig",
    "get_default_config",
    "set_default_config",
]
