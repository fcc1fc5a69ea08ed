"""Centralized configuration for CalcFlow.

This module defines:
- History and sweep settings for the calculator modes
- Input validation limits (length)
- Cache sizes for parsing
- Allowed SymPy functions and transformations
- Regex patterns for preprocessing
- The default theme

Configuration can be overridden via:
- CLI flags (see cli.py)
- Environment variables (prefixed with CALCFLOW_)
"""

import os
import re

import sympy as sp
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication_application,
    standard_transformations,
)

# Version is defined in pyproject.toml [project] section
try:
    import importlib.metadata

    VERSION = importlib.metadata.version("calcflow")
except Exception:
    # Package not installed (running from a checkout)
    VERSION = "1.0.0"

# Basic calculator
HISTORY_LIMIT = int(os.getenv("CALCFLOW_HISTORY_LIMIT", "5"))  # entries kept

# Function grapher sweep: [SWEEP_MIN, SWEEP_MAX] inclusive at SWEEP_STEP
SWEEP_MIN = float(os.getenv("CALCFLOW_SWEEP_MIN", "-10"))
SWEEP_MAX = float(os.getenv("CALCFLOW_SWEEP_MAX", "10"))
SWEEP_STEP = float(os.getenv("CALCFLOW_SWEEP_STEP", "0.2"))
SWEEP_DECIMALS = 10  # rounding applied to every sample x

# Matrix tool
MATRIX_SIZE = 3
DETERMINANT_DECIMALS = int(os.getenv("CALCFLOW_DETERMINANT_DECIMALS", "4"))

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("CALCFLOW_MAX_INPUT_LENGTH", "1000"))  # characters
MAX_EXPRESSION_DEPTH = int(
    os.getenv("CALCFLOW_MAX_EXPRESSION_DEPTH", "100")
)  # tree depth
MAX_EXPRESSION_NODES = int(
    os.getenv("CALCFLOW_MAX_EXPRESSION_NODES", "5000")
)  # total nodes
MAX_POWER_DIGITS = int(
    os.getenv("CALCFLOW_MAX_POWER_DIGITS", "10000")
)  # estimated digits of an exact numeric power

# Cache configuration
CACHE_SIZE_PARSE = int(os.getenv("CALCFLOW_CACHE_SIZE_PARSE", "1024"))

# Presentation
DEFAULT_THEME = os.getenv("CALCFLOW_THEME", "dark")
DEFAULT_GRAPH_EXPRESSION = "x^2"
DEFAULT_CALCULUS_EXPRESSION = "x^2 + 3x + 1"

ALLOWED_SYMPY_NAMES = {
    "pi": sp.pi,
    "e": sp.E,
    "E": sp.E,
    "sqrt": sp.sqrt,
    "cbrt": sp.cbrt,
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "asin": sp.asin,
    "acos": sp.acos,
    "atan": sp.atan,
    "sinh": sp.sinh,
    "cosh": sp.cosh,
    "tanh": sp.tanh,
    "log": sp.log,
    "ln": sp.log,
    "exp": sp.exp,
    "Abs": sp.Abs,
    "abs": sp.Abs,  # lowercase alias for convenience
    "Mod": sp.Mod,
    "mod": sp.Mod,
}

TRANSFORMATIONS = standard_transformations + (
    implicit_multiplication_application,
    convert_xor,
)

VAR_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

SQRT_UNICODE_REGEX = re.compile(r"√\s*\(")
DIGIT_LETTERS_REGEX = re.compile(r"(\d)\s*(?![eE][+-]?\d)([A-Za-z(])")  # 2x, not 1e3
