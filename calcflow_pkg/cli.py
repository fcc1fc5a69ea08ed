"""Command-line interface: argument parsing, one-shot runs and the interactive REPL."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from .app import HOME, MODE_TITLES, MODES, CalcFlowApp
from .calculus import INVALID_EXPRESSION, CalculusCalc
from .config import DEFAULT_THEME, VERSION
from .display import BUTTONS, ERROR_SENTINEL, DisplayBuffer
from .logging_config import get_logger, setup_logging
from .matrix import ERROR_PREFIX, MatrixState
from .plotting import render_ascii, save_plot
from .sweep import SampleSweep
from .themes import THEMES, Theme, style
from .types import EvalResult

logger = get_logger("cli")

BACK_COMMANDS = {":back", "back", ":home", "home"}
QUIT_COMMANDS = {"quit", "exit", ":quit", ":q"}

MODE_HELP = {
    "basic": (
        "Type keys: digits, + - * / and '.'; '=' evaluates, 'C' clears, "
        "'<' deletes the last character. Commands: :history"
    ),
    "graph": "Type an expression in x to plot it over [-10, 10]. Commands: :save PATH",
    "matrix": (
        "Commands: set I J VALUE | row I A B C | det | inv | show | reset "
        "(indices 0-2)"
    ),
    "calc": "Type an expression to differentiate. Commands: :var NAME",
}


def _health_check() -> int:
    """Run health check to verify dependencies and basic operations.

    Returns:
        Exit code (0 for success, non-zero for failures)
    """
    checks_passed = 0
    checks_failed = 0

    print("Running CalcFlow health check...")
    print("-" * 50)

    for module_name in ("sympy", "numpy", "matplotlib"):
        try:
            module = __import__(module_name)
            print(f"[OK] {module_name} {module.__version__} imported successfully")
            checks_passed += 1
        except ImportError as e:
            print(f"[FAIL] {module_name} import failed: {e}")
            checks_failed += 1

    checks = (
        ("Basic evaluation", lambda: _check_basic() == "14"),
        ("Function sweep", lambda: len(SampleSweep().plot("x^2")) == 101),
        ("Matrix determinant", lambda: _check_matrix() == "1.0000"),
        ("Derivative", lambda: CalculusCalc().differentiate("x^2 + 3x + 1") == "2*x + 3"),
    )
    for name, check in checks:
        try:
            if check():
                print(f"[OK] {name} works")
                checks_passed += 1
            else:
                print(f"[FAIL] {name} returned an unexpected result")
                checks_failed += 1
        except Exception as e:
            print(f"[FAIL] {name} check failed: {e}")
            checks_failed += 1

    print("-" * 50)
    print(f"Results: {checks_passed} passed, {checks_failed} failed")

    if checks_failed > 0:
        print("\n[WARN] Some health checks failed. Core functionality may be impaired.")
        return 1

    print("\n[OK] All health checks passed!")
    return 0


def _check_basic() -> str:
    buffer = DisplayBuffer()
    buffer.append("2+3*4")
    buffer.evaluate()
    return buffer.value


def _check_matrix() -> str:
    matrix = MatrixState()
    for i in range(3):
        matrix.set_cell(i, i, 1)
    return matrix.determinant()


def parse_matrix_text(text: str) -> list[list[str]]:
    """Split ``"1,2,3; 4,5,6; 7,8,9"`` into raw cell strings."""
    rows = [row for row in text.replace("\n", ";").split(";") if row.strip()]
    return [[cell.strip() for cell in row.replace(",", " ").split()] for row in rows]


def run_once(
    mode: str,
    expression: str,
    operation: str = "det",
    variable: str = "x",
    save_path: str | None = None,
) -> EvalResult:
    """Run a single action in ``mode`` and describe the outcome."""
    app = CalcFlowApp()
    calculator = app.open(mode)
    if isinstance(calculator, DisplayBuffer):
        calculator.append(expression.strip())
        ok = calculator.evaluate()
        return EvalResult(
            ok=ok,
            mode=mode,
            result=calculator.value if ok else None,
            error=None if ok else calculator.last_error,
            history=calculator.history.lines(),
        )
    if isinstance(calculator, SampleSweep):
        points = calculator.plot(expression)
        if save_path:
            try:
                save_plot(points, calculator.expression, save_path)
            except (OSError, ValueError) as e:
                logger.debug("Saving plot to %s failed: %s", save_path, e)
                return EvalResult(ok=False, mode=mode, error=f"Cannot save plot: {e}")
        return EvalResult(
            ok=bool(points),
            mode=mode,
            result=render_ascii(points),
            error=None if points else "No finite samples",
            points=[tuple(p) for p in points],
        )
    if isinstance(calculator, MatrixState):
        rows = parse_matrix_text(expression)
        try:
            for i, row in enumerate(rows):
                calculator.set_row(i, row)
        except (IndexError, ValueError) as e:
            return EvalResult(ok=False, mode=mode, error=f"Invalid matrix: {e}")
        text = calculator.inverse() if operation == "inv" else calculator.determinant()
        if text.startswith(ERROR_PREFIX):
            return EvalResult(ok=False, mode=mode, error=text[len(ERROR_PREFIX):])
        return EvalResult(ok=True, mode=mode, result=text)
    text = calculator.differentiate(expression, variable)
    if text == INVALID_EXPRESSION:
        return EvalResult(ok=False, mode=mode, error=text)
    return EvalResult(ok=True, mode=mode, result=text)


def print_result_pretty(res: EvalResult, output_format: str = "human") -> None:
    """Print result in specified format.

    Args:
        res: Result of a one-shot action
        output_format: "json" for JSON output, "human" for human-readable
    """
    if output_format == "json":
        print(json.dumps(res.to_dict(), indent=2, ensure_ascii=False))
        return
    if not res.ok:
        print("Error:", res.error)
        return
    if res.mode == "calc":
        print(f"d/dx = {res.result}")
    else:
        print(res.result)


class Repl:
    """Interactive terminal front end over ``CalcFlowApp``."""

    def __init__(self, app: CalcFlowApp, color: bool = True, out: Any = None):
        self.app = app
        self.color = color
        self.out = out or sys.stdout
        self.variable = "x"

    def say(self, text: str, token: str = "text") -> None:
        print(style(self.app.theme, token, text, self.color), file=self.out)

    def prompt(self) -> str:
        label = "calcflow" if self.app.mode == HOME else self.app.mode
        return f"{label}> "

    def show_home(self) -> None:
        glyph = THEMES[self.app.theme]["glyph"]
        self.say(f"CalcFlow Pro  [{glyph} {self.app.theme.value}]", "accent")
        for number, mode in enumerate(MODES, start=1):
            self.say(f"  {number}. {MODE_TITLES[mode]} ({mode})")
        self.say("Choose a mode by number or name; ':theme' switches theme, 'quit' exits.")

    def handle(self, line: str) -> bool:
        """Process one input line; returns False when the session should end."""
        line = line.strip()
        if not line:
            return True
        if line.lower() in QUIT_COMMANDS:
            return False
        if line == ":theme":
            self.app.cycle_theme()
            self.say(f"Theme: {self.app.theme.value}", "accent")
            return True
        if line == ":help":
            self.say(MODE_HELP.get(self.app.mode, "Modes: " + ", ".join(MODES)))
            return True
        if self.app.mode == HOME:
            self._handle_home(line)
            return True
        if line.lower() in BACK_COMMANDS:
            self.app.home()
            self.show_home()
            return True
        handler = getattr(self, f"_handle_{self.app.mode}")
        handler(line)
        return True

    def _handle_home(self, line: str) -> None:
        choice = line.lower()
        if choice.isdigit() and 1 <= int(choice) <= len(MODES):
            choice = MODES[int(choice) - 1]
        if choice not in MODES:
            self.say(f"Unknown mode: {line}", "error")
            return
        calculator = self.app.open(choice)
        self.say(f"{MODE_TITLES[choice]}: {MODE_HELP[choice]} ':back' returns home.", "accent")
        if isinstance(calculator, DisplayBuffer):
            self.say(" ".join(BUTTONS))
            self.say(calculator.value)
        elif isinstance(calculator, MatrixState):
            self.say(calculator.render_grid())

    def _handle_basic(self, line: str) -> None:
        buffer: DisplayBuffer = self.app.active
        keyboard = self.app.keyboard
        if line == ":history":
            for entry in buffer.history.lines() or ["(empty)"]:
                self.say(entry)
            return
        for char in line:
            if char == "=":
                buffer.press("=")
            elif char in "Cc":
                buffer.press("C")
            elif char == "<":
                keyboard.handle_key("Backspace")
            elif not char.isspace():
                keyboard.handle_key(char)
        self.say(buffer.value, "error" if buffer.value == ERROR_SENTINEL else "text")

    def _handle_graph(self, line: str) -> None:
        sweep: SampleSweep = self.app.active
        if line.startswith(":save"):
            path = line[len(":save"):].strip()
            if not path:
                self.say("Usage: :save PATH", "error")
                return
            if not sweep.points:
                sweep.plot()
            try:
                saved = save_plot(sweep.points, sweep.expression, path)
            except (OSError, ValueError) as e:
                self.say(f"Error: {e}", "error")
                return
            self.say(f"Saved {saved}")
            return
        points = sweep.plot(line)
        self.say(render_ascii(points))
        self.say(f"{len(points)} points", "accent")

    def _handle_matrix(self, line: str) -> None:
        matrix: MatrixState = self.app.active
        parts = line.split()
        command = parts[0].lower()
        try:
            if command == "set" and len(parts) == 4:
                matrix.set_cell(int(parts[1]), int(parts[2]), parts[3])
                self.say(matrix.render_grid())
            elif command == "row" and len(parts) == 5:
                matrix.set_row(int(parts[1]), parts[2:])
                self.say(matrix.render_grid())
            elif command == "show":
                self.say(matrix.render_grid())
            elif command == "reset":
                matrix.reset()
                self.say(matrix.render_grid())
            elif command in ("det", "inv"):
                text = matrix.determinant() if command == "det" else matrix.inverse()
                self.say(text, "error" if text.startswith(ERROR_PREFIX) else "text")
            else:
                self.say(MODE_HELP["matrix"], "error")
        except (IndexError, ValueError) as e:
            self.say(f"Error: {e}", "error")

    def _handle_calc(self, line: str) -> None:
        calc: CalculusCalc = self.app.active
        if line.startswith(":var"):
            name = line[len(":var"):].strip() or "x"
            self.variable = name
            self.say(f"Differentiating with respect to {name}")
            return
        result = calc.differentiate(line, self.variable)
        if result == INVALID_EXPRESSION:
            self.say(result, "error")
        else:
            self.say(f"d/d{self.variable} = {result}", "accent")

    def loop(self) -> None:
        """Interactive loop with graceful interrupt handling."""
        try:
            import readline  # noqa: F401
        except ImportError:
            # readline not available on Windows - that's fine
            pass
        self.show_home()
        while True:
            try:
                raw = input(self.prompt())
            except (EOFError, KeyboardInterrupt):
                print("\nGoodbye.", file=self.out)
                break
            if not self.handle(raw):
                print("Goodbye.", file=self.out)
                break
        self.app.home()


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for CalcFlow CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(prog="calcflow")
    parser.add_argument(
        "-m",
        "--mode",
        type=str,
        choices=list(MODES),
        default="basic",
        help="Calculator mode for --eval (default: basic)",
    )
    parser.add_argument(
        "-e",
        "--eval",
        type=str,
        help="Run one action in --mode and exit (non-interactive)",
        dest="eval_expr",
    )
    parser.add_argument(
        "--op",
        type=str,
        choices=["det", "inv"],
        default="det",
        help="Matrix operation for --mode matrix (default: det)",
    )
    parser.add_argument(
        "--var", type=str, default="x", help="Differentiation variable (default: x)"
    )
    parser.add_argument("--save-plot", type=str, help="Save the graph to an image file")
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument(
        "--theme",
        type=str,
        choices=[t.value for t in Theme],
        default=None,
        help=f"Starting theme (default: {DEFAULT_THEME})",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    parser.add_argument(
        "--health-check",
        action="store_true",
        help="Run health check and verify dependencies",
    )
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file)

    if args.version:
        print(VERSION)
        return 0
    if args.health_check:
        return _health_check()
    if args.eval_expr is not None:
        expr = args.eval_expr.strip()
        if not expr:
            print("Error: Empty input. Please enter an expression.")
            return 1
        res = run_once(args.mode, expr, args.op, args.var, args.save_plot)
        print_result_pretty(res, args.format)
        return 0 if res.ok else 1

    app = CalcFlowApp(theme=args.theme or DEFAULT_THEME)
    color = not args.no_color and sys.stdout.isatty()
    Repl(app, color=color).loop()
    return 0


if __name__ == "__main__":
    sys.exit(main_entry())
