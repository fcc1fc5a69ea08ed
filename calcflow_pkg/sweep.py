"""Function grapher: sample an expression across a fixed domain."""

from __future__ import annotations

import math
from typing import Any

import sympy as sp

from .config import (
    DEFAULT_GRAPH_EXPRESSION,
    SWEEP_DECIMALS,
    SWEEP_MAX,
    SWEEP_MIN,
    SWEEP_STEP,
)
from .evaluator import ExpressionEvaluator
from .logging_config import get_logger
from .types import ParseOrEvalError, SamplePoint

logger = get_logger("sweep")


def sample_xs(
    x_min: float = SWEEP_MIN, x_max: float = SWEEP_MAX, step: float = SWEEP_STEP
) -> list[float]:
    """Sample positions from ``x_min`` to ``x_max`` inclusive.

    Each x is computed as ``x_min + i*step`` and rounded, so the default
    domain yields exactly 101 values with 0 among them.
    """
    if step <= 0:
        raise ValueError("Sweep step must be positive")
    if x_max < x_min:
        raise ValueError("Sweep domain is empty")
    count = int(math.floor((x_max - x_min) / step + 1e-9)) + 1
    return [round(x_min + i * step, SWEEP_DECIMALS) for i in range(count)]


def finite_real(value: Any) -> float | None:
    """Return ``value`` as a float if it is a finite real number, else None."""
    try:
        num = sp.N(value)
        if num.is_real is not True:
            return None
        result = float(num)
    except (TypeError, ValueError, OverflowError, AttributeError):
        return None
    return result if math.isfinite(result) else None


class SampleSweep:
    """Grapher state: the current expression and its last sampled points."""

    def __init__(
        self,
        evaluator: ExpressionEvaluator | None = None,
        expression: str = DEFAULT_GRAPH_EXPRESSION,
        x_min: float = SWEEP_MIN,
        x_max: float = SWEEP_MAX,
        step: float = SWEEP_STEP,
        variable: str = "x",
    ):
        self.evaluator = evaluator or ExpressionEvaluator()
        self.expression = expression
        self.xs = sample_xs(x_min, x_max, step)
        self.variable = variable
        self.points: list[SamplePoint] = []

    def plot(self, expression: str | None = None) -> list[SamplePoint]:
        """Sample ``expression`` (or the current one) across the domain.

        Samples that fail to evaluate or are not finite reals are skipped;
        the sweep itself never raises. The result replaces ``points``.
        """
        if expression is not None:
            self.expression = expression
        points: list[SamplePoint] = []
        skipped = 0
        for x in self.xs:
            try:
                y = finite_real(
                    self.evaluator.evaluate(self.expression, {self.variable: x})
                )
            except ParseOrEvalError:
                y = None
            if y is None:
                skipped += 1
                continue
            points.append(SamplePoint(x, y))
        logger.debug(
            "Sampled %r: %d points, %d skipped", self.expression, len(points), skipped
        )
        self.points = points
        return points
