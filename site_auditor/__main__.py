"""
Entry point for running site_auditor as a module.

Usage: python -m site_auditor [args]
"""

import sys

from site_auditor.cli import main

if __name__ == "__main__":
    sys.exit(main())
