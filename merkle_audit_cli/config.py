"""
CLI Configuration

Configuration management for the merkle-audit CLI.
Supports environment variables and configuration files (JSON or YAML).
"""

from __future__ import annotations

import json
import os
from argparse import Namespace
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from merkle_audit.config import RuntimeConfig
from merkle_audit.schemas.errors import ConfigurationException


# Environment variable prefix
ENV_PREFIX = "MERKLE_AUDIT_"

OUTPUT_FORMATS = ("human", "json")


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Hashing, proof and display settings
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)

    # Logging
    log_level: str = "WARNING"
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"

    def to_dict(self) -> dict[str, Any]:
        data = self.runtime.to_dict()
        data.pop("extra", None)
        data.update(
            {
                "log_level": self.log_level,
                "log_file": self.log_file,
                "output_format": self.default_output_format,
            }
        )
        return data


def _read_config_data(path: Path) -> dict[str, Any]:
    with open(path, "r") as f:
        if path.suffix in (".yaml", ".yml"):
            import yaml
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationException(
            f"Config file must contain a mapping, got {type(data).__name__}",
            details={"path": str(path)},
        )
    return data


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON (or YAML) file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    data = _read_config_data(path)

    config = CLIConfig()
    config.runtime = RuntimeConfig.from_dict(data)

    # Logging
    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)

    # Output
    config.default_output_format = data.get("output_format", config.default_output_format)

    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    # Start with defaults
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        # Check for default config locations
        default_paths = [
            Path.cwd() / "merkle-audit.json",
            Path.cwd() / ".merkle-audit.json",
            Path.home() / ".config" / "merkle-audit" / "config.json",
        ]
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    # Override with environment variables
    config.runtime = config.runtime.with_env_overrides()
    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", config.log_level)
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")
    if os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT"):
        config.default_output_format = os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT", "human")

    if config.default_output_format not in OUTPUT_FORMATS:
        raise ConfigurationException(
            f"Unknown output format: {config.default_output_format}",
            setting="output_format",
        )

    return config


def apply_cli_overrides(config: CLIConfig, args: Namespace) -> CLIConfig:
    """Overlay global command-line flags (highest precedence) onto config."""
    data = config.runtime.to_dict()
    changed = False

    if getattr(args, "algorithm", None):
        data["hash"]["algorithm"] = args.algorithm
        changed = True
    if getattr(args, "no_domain_separation", False):
        data["hash"]["domain_separation"] = False
        changed = True
    if getattr(args, "hex_width", None) is not None:
        data["display"]["hex_width"] = args.hex_width
        changed = True

    if changed:
        config.runtime = RuntimeConfig.from_dict(data)
    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "log_level": "WARNING",
  "log_file": null,
  "output_format": "human",
  "hash": {
    "algorithm": "sha256d",
    "domain_separation": true,
    "leaf_tag": "00",
    "branch_tag": "01"
  },
  "proof": {
    "strategy": "index"
  },
  "display": {
    "hex_width": 16
  }
}
"""
