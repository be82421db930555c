"""
Entry point for running linesentry as a module.

Usage:
    python -m linesentry scan ./src
    python -m linesentry --help
"""

import sys
from linesentry.cli import main

if __name__ == "__main__":
    sys.exit(main())
