#!/usr/bin/env python3
"""
CalcFlow Pro - calculator suite

Main entry point for the CalcFlow calculator. This file is a thin wrapper
that delegates all functionality to the calcflow_pkg package.

Usage:
    python calcflow.py                             # Interactive REPL
    python calcflow.py -e "2+3*4"                  # Basic calculator
    python calcflow.py --mode graph -e "x^2"       # Function sweep
    python calcflow.py --mode matrix --op inv -e "1,0,0;0,1,0;0,0,1"
    python calcflow.py --mode calc -e "x^2 + 3x + 1"
    python calcflow.py --help                      # Show help
"""

from __future__ import annotations

import sys


def main() -> int:
    """
    Main entry point for CalcFlow.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    try:
        from calcflow_pkg.cli import main_entry

        return main_entry(sys.argv[1:])
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        return 1
    except ImportError as e:
        print(f"Error: Failed to import calcflow_pkg: {e}")
        print("Please ensure all dependencies are installed: pip install -e .")
        return 1


if __name__ == "__main__":
    sys.exit(main())
