"""Entry point for ``python -m dudo``."""

import sys

from dudo.cli import main

if __name__ == "__main__":
    sys.exit(main())
