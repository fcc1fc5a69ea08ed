"""Input parsing and preprocessing module.

This module handles:
- Input sanitization and validation
- Expression preprocessing (symbol conversion, exponent handling, etc.)
- SymPy expression parsing with security validation
- Result formatting for the calculator display
- Balancing checks for parentheses/brackets
"""

from __future__ import annotations

import math
import re
from functools import lru_cache
from typing import Any

import sympy as sp
from sympy import parse_expr
from sympy.core.function import AppliedUndef

from .config import (
    ALLOWED_SYMPY_NAMES,
    CACHE_SIZE_PARSE,
    DIGIT_LETTERS_REGEX,
    MAX_EXPRESSION_DEPTH,
    MAX_EXPRESSION_NODES,
    MAX_INPUT_LENGTH,
    MAX_POWER_DIGITS,
    SQRT_UNICODE_REGEX,
    TRANSFORMATIONS,
)
from .logging_config import get_logger
from .types import ValidationError

logger = get_logger("parser")

# Basic denylist to avoid dangerous tokens before SymPy parsing
FORBIDDEN_TOKENS = (
    "__",
    "import",
    "lambda",
    "eval",
    "exec",
    "open",
    "os.",
    "sys.",
    "subprocess",
    "builtins",
    "getattr",
    "setattr",
    "delattr",
    "compile",
    "globals",
    "locals",
)

ALLOWED_FUNCTION_NAMES = frozenset(ALLOWED_SYMPY_NAMES) | frozenset(
    getattr(obj, "__name__", name) for name, obj in ALLOWED_SYMPY_NAMES.items()
)

FROM_SUPERSCRIPT_MAP = {
    "⁰": "0",
    "¹": "1",
    "²": "2",
    "³": "3",
    "⁴": "4",
    "⁵": "5",
    "⁶": "6",
    "⁷": "7",
    "⁸": "8",
    "⁹": "9",
    "⁻": "-",
}
SUPERSCRIPT_REGEX = re.compile(f"([{''.join(FROM_SUPERSCRIPT_MAP)}]+)")


def is_balanced(input_str: str) -> tuple[bool, int | None]:
    """Check if parentheses/brackets are balanced. Returns (is_balanced, error_position)."""
    pairs = {"(": ")", "[": "]", "{": "}"}
    stack: list[tuple[str, int]] = []  # (char, position)
    for i, char in enumerate(input_str):
        if char in pairs:
            stack.append((char, i))
        elif char in pairs.values():
            if not stack:
                return False, i
            opening, _ = stack.pop()
            if pairs[opening] != char:
                return False, i
    if stack:
        return False, stack[0][1]  # Return position of first unmatched
    return True, None


def preprocess(input_str: str) -> str:
    """Preprocess input string for parsing.

    Applies transformations:
    - Validates input length and forbidden tokens
    - Standardizes mathematical symbols (unicode variants to ASCII)
    - Converts exponents (^ to **, superscripts to **)
    - Converts Unicode square root (√) to sqrt(
    - Inserts implicit multiplication (2x -> 2*x)
    - Validates balanced parentheses/brackets

    Args:
        input_str: Raw input string from the user

    Returns:
        Preprocessed and sanitized string ready for SymPy parsing

    Raises:
        ValidationError: If input is empty, too long, contains forbidden tokens,
                        or has unbalanced parentheses/brackets
    """
    input_str = input_str.strip() if input_str else ""
    if not input_str:
        raise ValidationError("Input cannot be empty", "EMPTY_INPUT")
    if len(input_str) > MAX_INPUT_LENGTH:
        raise ValidationError(
            f"Input too long (>{MAX_INPUT_LENGTH} characters)", "TOO_LONG"
        )

    lowered = input_str.lower()
    for tok in FORBIDDEN_TOKENS:
        if tok in lowered:
            logger.warning(
                "Blocked input containing forbidden token %r (length %d)",
                tok,
                len(input_str),
            )
            raise ValidationError(
                f"Input contains forbidden token: {tok}", "FORBIDDEN_TOKEN"
            )

    processed_str = input_str.replace("−", "-").replace("–", "-")
    processed_str = processed_str.replace("π", "pi")
    processed_str = processed_str.replace("×", "*").replace("÷", "/")

    processed_str = processed_str.replace("^", "**")

    def from_superscript_converter(m: re.Match) -> str:
        return "**" + "".join(FROM_SUPERSCRIPT_MAP[char] for char in m.group(1))

    processed_str = SUPERSCRIPT_REGEX.sub(from_superscript_converter, processed_str)
    processed_str = SQRT_UNICODE_REGEX.sub("sqrt(", processed_str)
    processed_str = DIGIT_LETTERS_REGEX.sub(r"\1*\2", processed_str)
    processed_str = re.sub(r"\s+", " ", processed_str).strip()

    balanced, error_pos = is_balanced(processed_str)
    if not balanced:
        raise ValidationError(
            f"Mismatched or unbalanced parentheses/brackets at position {error_pos}",
            "UNBALANCED_PARENS",
        )
    return processed_str


def _validate_expression_tree(expr: Any) -> None:
    """Reject parse results that are not plain SymPy math.

    Only whitelisted functions may appear; undefined functions such as
    ``f(2)`` and non-SymPy objects are refused.
    """
    if not isinstance(expr, sp.Basic):
        raise ValidationError(
            f"Expression type '{type(expr).__name__}' not allowed", "FORBIDDEN_TYPE"
        )
    for node in sp.preorder_traversal(expr):
        if isinstance(node, AppliedUndef):
            raise ValidationError(
                f"Undefined function '{node.func.__name__}'", "UNKNOWN_FUNCTION"
            )
        if isinstance(node, sp.Function):
            func_name = getattr(node.func, "__name__", str(node.func))
            if func_name not in ALLOWED_FUNCTION_NAMES:
                logger.warning("Blocked forbidden function %r", func_name)
                raise ValidationError(
                    f"Function '{func_name}' not allowed", "FORBIDDEN_FUNCTION"
                )


def _power_digits(node: sp.Pow) -> float:
    """Estimated decimal digits of an exact numeric power, |exp| * |log10 |base||."""
    try:
        base = abs(sp.N(node.base, 15))
        exponent = abs(sp.N(node.exp, 15))
        if base.is_finite is not True or exponent.is_finite is not True:
            return 0.0  # zoo/oo/nan powers evaluate immediately
        if base.is_zero:
            return 0.0
        return float(exponent * abs(sp.log(base, 10)))
    except (TypeError, ValueError, ArithmeticError):
        return 0.0


def _check_complexity(expr: Any) -> None:
    """Bound the size of an unevaluated parse tree before SymPy evaluates it.

    Walks bottom-up so every exponent is itself already bounded when its
    magnitude is estimated.
    """
    if not isinstance(expr, sp.Basic):
        return
    node_count = 0
    stack = [(expr, 0)]
    while stack:
        node, depth = stack.pop()
        node_count += 1
        if node_count > MAX_EXPRESSION_NODES:
            raise ValidationError(
                f"Expression too complex (>{MAX_EXPRESSION_NODES} nodes)", "TOO_COMPLEX"
            )
        if depth > MAX_EXPRESSION_DEPTH:
            raise ValidationError(
                f"Expression too deeply nested (>{MAX_EXPRESSION_DEPTH} levels)",
                "TOO_DEEP",
            )
        stack.extend((arg, depth + 1) for arg in node.args)

    for node in sp.postorder_traversal(expr):
        if isinstance(node, sp.Pow) and node.is_number:
            digits = _power_digits(node)
            if digits > MAX_POWER_DIGITS:
                logger.warning("Rejected power with about %.3g digits", digits)
                raise ValidationError("Expression too complex", "TOO_COMPLEX")


@lru_cache(maxsize=CACHE_SIZE_PARSE)
def parse_unevaluated(expr_str: str) -> Any:
    """Parse without evaluating and check the tree's size.

    Raises:
        ValidationError: TOO_COMPLEX or TOO_DEEP for trees too costly to evaluate
    """
    expr = parse_expr(
        expr_str,
        local_dict=dict(ALLOWED_SYMPY_NAMES),
        transformations=TRANSFORMATIONS,
        evaluate=False,
    )
    _check_complexity(expr)
    return expr


@lru_cache(maxsize=CACHE_SIZE_PARSE)
def parse_preprocessed(expr_str: str) -> sp.Basic:
    """Parse and validate a preprocessed expression string."""
    parse_unevaluated(expr_str)
    expr = parse_expr(
        expr_str,
        local_dict=dict(ALLOWED_SYMPY_NAMES),
        transformations=TRANSFORMATIONS,
        evaluate=True,
    )
    _validate_expression_tree(expr)
    return expr


def _format_real(val: float) -> str:
    if math.isnan(val):
        return "NaN"
    if math.isinf(val):
        return "Infinity" if val > 0 else "-Infinity"
    if val.is_integer() and abs(val) < 1e21:
        return str(int(val))
    return repr(val)


def _format_integer(val: int) -> str:
    if abs(val) < 10**21:
        return str(val)
    try:
        return _format_real(float(val))
    except OverflowError:
        return "Infinity" if val > 0 else "-Infinity"


def format_value(value: Any) -> str:
    """Format an evaluation result for the calculator display.

    Integers below 1e21 keep every digit, other real numbers use the shortest float
    representation (``7/2`` -> ``"3.5"``), non-finite reals become
    ``Infinity``/``-Infinity``/``NaN`` and symbolic results fall back to
    SymPy's string form.

    Args:
        value: SymPy value (or anything sympify accepts)

    Returns:
        Display text
    """
    value = sp.sympify(value)
    if value is sp.nan:
        return "NaN"
    if value in (sp.oo, sp.zoo):
        return "Infinity"
    if value == -sp.oo:
        return "-Infinity"
    if value.is_Integer:
        return _format_integer(int(value))
    if not value.is_number:
        return str(value)
    try:
        re_part, im_part = (float(part) for part in sp.N(value).as_real_imag())
    except (TypeError, ValueError, OverflowError):
        return str(value)
    if im_part == 0:
        return _format_real(re_part)
    imag = "i" if abs(im_part) == 1 else f"{_format_real(abs(im_part))}i"
    if re_part == 0:
        return imag if im_part > 0 else f"-{imag}"
    sign = "+" if im_part > 0 else "-"
    return f"{_format_real(re_part)} {sign} {imag}"


def format_number(val: Any, decimals: int) -> str:
    """Format a numeric value with a fixed number of decimals ("1.0000")."""
    return f"{float(val):.{int(decimals)}f}"
