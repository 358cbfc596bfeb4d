"""Entry point for ``python -m docletkit``."""

from __future__ import annotations

import sys

from docletkit.cli import main

if __name__ == "__main__":
    sys.exit(main())
