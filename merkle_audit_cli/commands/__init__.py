"""
CLI command modules.
"""

from merkle_audit_cli.commands import tree, prove, verify

__all__ = ["tree", "prove", "verify"]
