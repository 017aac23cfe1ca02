"""Allow ``python -m profilebook`` without the installed console script."""

from __future__ import annotations

import sys

from profilebook.cli import main

if __name__ == "__main__":
    sys.exit(main())
