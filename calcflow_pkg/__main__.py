"""Main entry point for running calcflow_pkg as a module.

This allows running CalcFlow with:
    python -m calcflow_pkg
    python -m calcflow_pkg --health-check
    python -m calcflow_pkg -e "2+3*4"
    python -m calcflow_pkg --mode graph -e "sin(x)"

This is equivalent to running:
    python -m calcflow_pkg.cli
    python calcflow.py
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())
