"""Entry point for running osmwd directly.

Usage:
    python -m osmwd
"""

import sys

from osmwd.cli import main

if __name__ == "__main__":
    sys.exit(main())
