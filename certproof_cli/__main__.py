"""
Module execution entry point.

Allows running with: python -m certproof_cli
"""

import sys
from certproof_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
