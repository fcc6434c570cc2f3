"""
merkle-audit CLI

Command-line interface for building Merkle trees and checking audit proofs.

Usage:
    python -m merkle_audit_cli tree alpha beta kappa
    python -m merkle_audit_cli root --file blocks.txt
    python -m merkle_audit_cli prove --file blocks.txt --leaf beta --out proof.json
    python -m merkle_audit_cli verify proof.json --root <hex>
    python -m merkle_audit_cli demo
"""

__version__ = "0.1.0"
