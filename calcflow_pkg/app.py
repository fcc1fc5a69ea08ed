"""Mode selector: owns the active theme and at most one active calculator."""

from __future__ import annotations

from typing import Union

from .calculus import CalculusCalc
from .display import DisplayBuffer
from .evaluator import ExpressionEvaluator
from .keyboard import KeyboardListener
from .logging_config import get_logger
from .matrix import MatrixState
from .sweep import SampleSweep
from .themes import Theme, next_theme, resolve_theme

logger = get_logger("app")

HOME = "home"
MODES = ("basic", "graph", "matrix", "calc")
MODE_TITLES = {
    "basic": "Calculator",
    "graph": "Graph",
    "matrix": "Matrix",
    "calc": "Calculus",
}

Calculator = Union[DisplayBuffer, SampleSweep, MatrixState, CalculusCalc]


class CalcFlowApp:
    """Routes user actions to exactly one calculator.

    Opening a mode builds fresh state; returning home discards it. The
    keyboard listener exists only while the basic calculator is active.
    """

    def __init__(
        self,
        theme: str | Theme | None = None,
        evaluator: ExpressionEvaluator | None = None,
    ):
        self.evaluator = evaluator or ExpressionEvaluator()
        self.theme = resolve_theme(theme)
        self.mode = HOME
        self.active: Calculator | None = None
        self.keyboard: KeyboardListener | None = None

    def cycle_theme(self) -> Theme:
        self.theme = next_theme(self.theme)
        logger.debug("Theme switched to %s", self.theme.value)
        return self.theme

    def open(self, mode: str) -> Calculator:
        """Enter ``mode`` with fresh state, leaving the current mode first."""
        if mode not in MODES:
            raise ValueError(f"Unknown mode: {mode!r} (expected one of {', '.join(MODES)})")
        self.home()
        if mode == "basic":
            buffer = DisplayBuffer(self.evaluator)
            self.keyboard = KeyboardListener(buffer)
            self.keyboard.attach()
            self.active = buffer
        elif mode == "graph":
            self.active = SampleSweep(self.evaluator)
        elif mode == "matrix":
            self.active = MatrixState(self.evaluator)
        else:
            self.active = CalculusCalc(self.evaluator)
        self.mode = mode
        logger.debug("Entered mode %s", mode)
        return self.active

    def home(self) -> None:
        """Return to the mode menu, discarding the active calculator."""
        if self.keyboard is not None:
            self.keyboard.detach()
            self.keyboard = None
        self.active = None
        self.mode = HOME
