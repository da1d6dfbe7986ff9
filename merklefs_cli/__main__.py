"""
Module execution entry point.

Allows running with: python -m merklefs_cli
"""

import sys
from merklefs_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
