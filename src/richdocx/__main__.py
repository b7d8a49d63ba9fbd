#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Run the richdocx command-line tool with ``python -m richdocx``."""

import sys

from richdocx.cli import main

if __name__ == "__main__":
    sys.exit(main())
