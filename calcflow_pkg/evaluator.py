"""Expression evaluation facade over SymPy.

Every calculator mode talks to SymPy exclusively through ``ExpressionEvaluator``.
All failures surface as ``ParseOrEvalError`` (or ``SingularMatrixError`` for
inverses); no other exception type escapes these methods.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import sympy as sp

from .config import MATRIX_SIZE, VAR_NAME_RE
from .logging_config import get_logger
from .parser import format_value, parse_preprocessed, parse_unevaluated, preprocess
from .types import ParseOrEvalError, SingularMatrixError, ValidationError

logger = get_logger("evaluator")


def _to_rational(value: Any) -> sp.Rational:
    """Convert a cell value to an exact rational (0.1 -> 1/10)."""
    if isinstance(value, int):
        return sp.Integer(value)
    return sp.Rational(repr(float(value)))


class ExpressionEvaluator:
    """Thin, stateless wrapper around SymPy parsing, evaluation and calculus."""

    def parse(self, expression_text: str) -> sp.Basic:
        """Preprocess and parse ``expression_text``.

        Raises:
            ParseOrEvalError: On invalid input or syntax
        """
        try:
            return parse_preprocessed(preprocess(expression_text))
        except ValidationError as e:
            raise ParseOrEvalError(e.message, e.code) from e
        except (SyntaxError, TypeError, ValueError, ArithmeticError, sp.SympifyError) as e:
            logger.debug("Parse error for %r: %s", expression_text, e)
            raise ParseOrEvalError(f"Invalid expression: {e}", "PARSE_ERROR") from e
        except Exception as e:
            # tokenize.TokenError and friends from SymPy's parser
            if "TokenError" in type(e).__name__:
                logger.debug("Tokenize error for %r: %s", expression_text, e)
                raise ParseOrEvalError("Incomplete expression", "PARSE_ERROR") from e
            logger.exception("Unexpected parse error")
            raise ParseOrEvalError(f"Invalid expression: {e}", "UNKNOWN_ERROR") from e

    def evaluate(
        self, expression_text: str, bindings: Mapping[str, float] | None = None
    ) -> sp.Basic:
        """Evaluate an expression, optionally binding variables to numbers.

        Args:
            expression_text: Expression such as ``"2+3*4"`` or ``"x^2"``
            bindings: Variable name -> number map, e.g. ``{"x": 0.2}``

        Returns:
            A SymPy value. Finiteness is not checked here.

        Raises:
            ParseOrEvalError: On malformed syntax or unknown identifiers
        """
        expr = self.parse(expression_text)
        try:
            if bindings:
                subs = {sp.Symbol(name): sp.sympify(val) for name, val in bindings.items()}
                expr = expr.subs(subs)
            unbound = sorted(str(s) for s in expr.free_symbols)
            if unbound:
                raise ParseOrEvalError(
                    f"Undefined symbol {', '.join(unbound)}", "UNDEFINED_SYMBOL"
                )
            if expr is sp.zoo and not bindings:
                return self._signed_infinity(expression_text)
            return expr
        except ParseOrEvalError:
            raise
        except (TypeError, ValueError, ArithmeticError) as e:
            raise ParseOrEvalError(f"Evaluation failed: {e}", "EVAL_ERROR") from e

    @staticmethod
    def _signed_infinity(expression_text: str) -> sp.Basic:
        """Resolve a complex infinity from a division by zero to ``oo`` or ``-oo``.

        Every literal zero is read as approaching 0 from above, so ``1/0`` is
        ``oo``, ``-1/0`` and ``1/(0*-1)`` are ``-oo``. Anything the one-sided
        limit cannot sign stays ``zoo``.
        """
        tree = parse_unevaluated(preprocess(expression_text))
        zeros = [atom for atom in tree.atoms(sp.Number) if atom.is_zero]
        if not zeros:
            return sp.zoo
        eps = sp.Dummy("eps", positive=True)
        try:
            limit = sp.limit(tree.xreplace({z: eps for z in zeros}), eps, 0, "+")
        except (NotImplementedError, TypeError, ValueError, ArithmeticError) as e:
            logger.debug("Could not sign %r: %s", expression_text, e)
            return sp.zoo
        return limit if limit in (sp.oo, -sp.oo) else sp.zoo

    def evaluate_to_text(
        self, expression_text: str, bindings: Mapping[str, float] | None = None
    ) -> str:
        """Evaluate and format the result for display."""
        return format_value(self.evaluate(expression_text, bindings))

    @staticmethod
    def _to_matrix(matrix: Sequence[Sequence[Any]]) -> sp.Matrix:
        rows = [list(row) for row in matrix]
        if len(rows) != MATRIX_SIZE or any(len(row) != MATRIX_SIZE for row in rows):
            raise ParseOrEvalError(
                f"Matrix must be {MATRIX_SIZE}x{MATRIX_SIZE}", "BAD_MATRIX"
            )
        try:
            return sp.Matrix([[_to_rational(v) for v in row] for row in rows])
        except (TypeError, ValueError) as e:
            raise ParseOrEvalError(f"Invalid matrix entry: {e}", "BAD_MATRIX") from e

    def determinant(self, matrix: Sequence[Sequence[Any]]) -> sp.Basic:
        """Exact determinant of a 3x3 numeric matrix."""
        return self._to_matrix(matrix).det()

    def inverse(self, matrix: Sequence[Sequence[Any]]) -> list[list[sp.Basic]]:
        """Exact inverse of a 3x3 numeric matrix.

        Raises:
            SingularMatrixError: If the matrix is not invertible
        """
        m = self._to_matrix(matrix)
        if m.det() == 0:
            raise SingularMatrixError()
        try:
            return m.inv().tolist()
        except ValueError as e:  # NonInvertibleMatrixError
            raise SingularMatrixError() from e

    def derivative(self, expression_text: str, with_respect_to: str = "x") -> sp.Basic:
        """Symbolic derivative of ``expression_text``.

        Raises:
            ParseOrEvalError: On invalid input or an invalid variable name
        """
        if not VAR_NAME_RE.match(with_respect_to or ""):
            raise ParseOrEvalError(
                f"Invalid variable name: {with_respect_to!r}", "BAD_VARIABLE"
            )
        expr = self.parse(expression_text)
        try:
            return sp.diff(expr, sp.Symbol(with_respect_to))
        except (TypeError, ValueError, NotImplementedError) as e:
            raise ParseOrEvalError(f"Differentiation failed: {e}", "DIFF_ERROR") from e
