"""
Parity CLI entry point.

Usage:
    python -m parity.cli equivalent expected.json actual.json [--strict]
    python -m parity.cli equal expected.json actual.json
"""

import sys
from .main import main

if __name__ == "__main__":
    sys.exit(main())
