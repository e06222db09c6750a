"""Entry point for the homework tracker when run as a module.

This allows the package to be run with: python -m homework
"""

import sys

from homework.cli import main

if __name__ == "__main__":
    sys.exit(main())
