"""Type definitions, result dataclasses and the error taxonomy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NamedTuple


@dataclass(frozen=True)
class HistoryEntry:
    """One successful evaluation of the basic calculator."""

    source: str
    result: str

    def __str__(self) -> str:
        return f"{self.source} = {self.result}"


class SamplePoint(NamedTuple):
    """A single (x, y) sample produced by a sweep."""

    x: float
    y: float


@dataclass
class EvalResult:
    """Result of a calculator action, shaped for CLI/JSON output."""

    ok: bool
    mode: str
    result: str | None = None
    error: str | None = None
    history: list[str] | None = None
    points: list[tuple[float, float]] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok, "mode": self.mode}
        if self.result is not None:
            result_dict["result"] = self.result
        if self.error is not None:
            result_dict["error"] = self.error
        if self.history is not None:
            result_dict["history"] = self.history
        if self.points is not None:
            result_dict["points"] = [list(p) for p in self.points]
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return f"EvalResult(ok=False, mode={self.mode!r}, error={self.error!r})"
        parts = [f"ok={self.ok}", f"mode={self.mode!r}"]
        if self.result is not None:
            parts.append(f"result={self.result!r}")
        if self.points is not None:
            parts.append(f"points=<{len(self.points)}>")
        return f"EvalResult({', '.join(parts)})"


class ValidationError(Exception):
    """Raised when input validation fails before parsing."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ParseOrEvalError(Exception):
    """Raised when an expression cannot be parsed or evaluated."""

    def __init__(self, message: str, code: str = "PARSE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class SingularMatrixError(Exception):
    """Raised when a matrix has no inverse."""

    def __init__(
        self,
        message: str = "Cannot calculate inverse, determinant is zero",
        code: str = "SINGULAR_MATRIX",
    ):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message
