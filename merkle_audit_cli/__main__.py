"""
Module execution entry point.

Allows running with: python -m merkle_audit_cli
"""

import sys
from merkle_audit_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
