"""3x3 matrix tool: editable grid plus determinant and inverse requests."""

from __future__ import annotations

import json
import math
from typing import Any

from .config import DETERMINANT_DECIMALS, MATRIX_SIZE
from .evaluator import ExpressionEvaluator
from .logging_config import get_logger
from .parser import format_number
from .types import ParseOrEvalError, SingularMatrixError

logger = get_logger("matrix")

ERROR_PREFIX = "Error: "

Number = int | float


def coerce_cell(raw: Any) -> Number:
    """Parse a cell input; anything that is not a finite number becomes 0."""
    if isinstance(raw, bool):
        return int(raw)
    if isinstance(raw, int):
        return raw
    try:
        value = float(str(raw).strip())
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(value):
        return 0
    return int(value) if value.is_integer() and abs(value) < 2**53 else value


def _json_number(value: Any) -> Number:
    value = float(value)
    return int(value) if value.is_integer() else value


def make_grid() -> list[list[Number]]:
    return [[0] * MATRIX_SIZE for _ in range(MATRIX_SIZE)]


class MatrixState:
    """A fixed 3x3 grid of numbers and the last rendered result."""

    def __init__(self, evaluator: ExpressionEvaluator | None = None):
        self.evaluator = evaluator or ExpressionEvaluator()
        self.cells = make_grid()
        self.result = ""

    def set_cell(self, i: int, j: int, raw: Any) -> Number:
        """Set cell (i, j) from raw input, coercing invalid input to 0.

        Raises:
            IndexError: If (i, j) lies outside the grid
        """
        if not (0 <= i < MATRIX_SIZE and 0 <= j < MATRIX_SIZE):
            raise IndexError(f"Cell ({i}, {j}) outside {MATRIX_SIZE}x{MATRIX_SIZE} grid")
        value = coerce_cell(raw)
        self.cells[i][j] = value
        return value

    def set_row(self, i: int, raws: list[Any]) -> None:
        if len(raws) != MATRIX_SIZE:
            raise ValueError(f"A row needs exactly {MATRIX_SIZE} values")
        for j, raw in enumerate(raws):
            self.set_cell(i, j, raw)

    def reset(self) -> None:
        self.cells = make_grid()
        self.result = ""

    def determinant(self) -> str:
        """Determinant with fixed decimals (``"1.0000"``), or an error string."""
        try:
            det = self.evaluator.determinant(self.cells)
            self.result = format_number(det, DETERMINANT_DECIMALS)
        except (ParseOrEvalError, TypeError, ValueError, OverflowError) as e:
            logger.debug("Determinant failed: %s", e)
            self.result = f"{ERROR_PREFIX}{e}"
        return self.result

    def inverse(self) -> str:
        """Inverse as an indented JSON nested array, or an error string."""
        try:
            inv = self.evaluator.inverse(self.cells)
            rows = [[_json_number(v) for v in row] for row in inv]
            self.result = json.dumps(rows, indent=2)
        except (SingularMatrixError, ParseOrEvalError, TypeError, ValueError, OverflowError) as e:
            logger.debug("Inverse failed: %s", e)
            self.result = f"{ERROR_PREFIX}{e}"
        return self.result

    def render_grid(self) -> str:
        width = max(len(f"{v:g}") for row in self.cells for v in row)
        return "\n".join(
            "[ " + "  ".join(f"{v:g}".rjust(width) for v in row) + " ]"
            for row in self.cells
        )
