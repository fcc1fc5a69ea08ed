"""Derivative mode."""

from __future__ import annotations

from .config import DEFAULT_CALCULUS_EXPRESSION
from .evaluator import ExpressionEvaluator
from .logging_config import get_logger
from .types import ParseOrEvalError

logger = get_logger("calculus")

INVALID_EXPRESSION = "Invalid expression"


class CalculusCalc:
    """Holds the derivative input and its last rendered result."""

    def __init__(
        self,
        evaluator: ExpressionEvaluator | None = None,
        expression: str = DEFAULT_CALCULUS_EXPRESSION,
    ):
        self.evaluator = evaluator or ExpressionEvaluator()
        self.input = expression
        self.result = ""

    def differentiate(self, expression: str | None = None, variable: str = "x") -> str:
        """Differentiate ``expression`` (or the current input) with respect to ``variable``.

        Returns:
            The derivative as text (``"2*x + 3"``), or ``"Invalid expression"``
        """
        if expression is not None:
            self.input = expression
        try:
            self.result = str(self.evaluator.derivative(self.input, variable))
        except ParseOrEvalError as e:
            logger.debug("Differentiation of %r failed: %s", self.input, e)
            self.result = INVALID_EXPRESSION
        return self.result
