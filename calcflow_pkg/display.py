"""Display buffer for the basic calculator.

The buffer is never empty at rest: ``"0"`` is the reset state and ``"Error"``
marks a failed evaluation. Consecutive operators are accepted as typed; a
malformed buffer is reported by ``evaluate()``.
"""

from __future__ import annotations

from .evaluator import ExpressionEvaluator
from .history import HistoryLog
from .logging_config import get_logger
from .parser import format_value
from .types import HistoryEntry, ParseOrEvalError

logger = get_logger("display")

RESET_SENTINEL = "0"
ERROR_SENTINEL = "Error"
DECIMAL_POINT = "."

OPERATORS = "+-*/"
KEY_TOKENS = "0123456789" + OPERATORS + DECIMAL_POINT

# Keypad layout, row by row
BUTTONS = (
    "C", "/",
    "7", "8", "9", "*",
    "4", "5", "6", "-",
    "1", "2", "3", "+",
    "0", ".", "=",
)


class DisplayBuffer:
    """In-progress expression text plus the history of evaluations."""

    def __init__(
        self,
        evaluator: ExpressionEvaluator | None = None,
        history: HistoryLog | None = None,
    ):
        self.evaluator = evaluator or ExpressionEvaluator()
        self.history = history if history is not None else HistoryLog()
        self.value = RESET_SENTINEL
        self.last_error: str | None = None

    @property
    def state(self) -> str:
        """``"idle"``, ``"editing"`` or ``"error"``."""
        if self.value == ERROR_SENTINEL:
            return "error"
        if self.value == RESET_SENTINEL:
            return "idle"
        return "editing"

    def append(self, token: str) -> None:
        if not token:
            return
        if self.value == ERROR_SENTINEL:
            self.value = token
        elif self.value == RESET_SENTINEL and token != DECIMAL_POINT:
            self.value = token
        else:
            self.value += token

    def backspace(self) -> None:
        self.value = self.value[:-1] or RESET_SENTINEL

    def clear(self) -> None:
        self.value = RESET_SENTINEL

    def evaluate(self) -> bool:
        """Evaluate the buffer in place.

        On success the result replaces the buffer and ``"{source} = {result}"``
        is recorded in the history. On failure the buffer becomes ``"Error"``
        and nothing is recorded.

        Returns:
            True if the evaluation succeeded
        """
        source = self.value
        try:
            result_text = format_value(self.evaluator.evaluate(source))
        except ParseOrEvalError as e:
            logger.debug("Evaluation of %r failed: %s", source, e)
            self.value = ERROR_SENTINEL
            self.last_error = str(e)
            return False
        self.last_error = None
        self.history.record(HistoryEntry(source, result_text))
        self.value = result_text
        return True

    def press(self, button: str) -> None:
        """Dispatch a keypad button: ``C`` clears, ``=`` evaluates, others append."""
        if button == "C":
            self.clear()
        elif button == "=":
            self.evaluate()
        else:
            self.append(button)
