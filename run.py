"""Entry point for the PEMPO embed command."""

import sys

from pempo.cli import main

if __name__ == "__main__":
    sys.exit(main())
