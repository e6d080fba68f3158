#!/usr/bin/env python
"""CLI wrapper for airport lookups; see ``airport_search.cli`` for options."""
import sys
from pathlib import Path

# Allow running from a checkout without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from airport_search.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
